# timesheet-backend/app/services/analytics.py
"""
Reduces an already-scoped set of timesheet entries to reporting metrics.

Entries only need `user_id`, `date`, `total_hours`, `billable`, `status`,
`priority` and `department`. Scope is applied upstream; the department and
user breakdowns here are sub-groupings of that set, never a re-scoping.
Every rate is 0 for an empty set.
"""
import math
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Sequence

from app.db.models import PRIORITIES, STATUSES
from app.schemas.analytics import DepartmentSummary, Summary, TrendBucket, UserSummary

DEFAULT_EXPECTED_HOURS = 8.0
GRANULARITIES = ("daily", "weekly", "monthly")
TREND_DEADBAND = 0.05


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _capped_percent(numerator: float, denominator: float) -> int:
    return min(100, _round_half_up(_ratio(numerator, denominator) * 100))


def _metrics(entries: Sequence, expected_hours_per_day: float) -> dict:
    total_hours = sum(e.total_hours for e in entries)
    billable_hours = sum(e.total_hours for e in entries if e.billable)
    unique_users = len({e.user_id for e in entries})
    total_days = len({e.date for e in entries})
    completed = sum(1 for e in entries if e.status == "Completed")

    daily: Dict[tuple, float] = defaultdict(float)
    for e in entries:
        daily[(e.user_id, e.date)] += e.total_hours
    overtime = sum(max(0.0, hours - expected_hours_per_day) for hours in daily.values())

    avg_per_user_day = _ratio(total_hours, unique_users * total_days)
    capacity = unique_users * expected_hours_per_day * total_days

    status_breakdown = {status: 0 for status in STATUSES}
    priority_breakdown = {priority: 0 for priority in PRIORITIES}
    for e in entries:
        status_breakdown[e.status] = status_breakdown.get(e.status, 0) + 1
        priority_breakdown[e.priority] = priority_breakdown.get(e.priority, 0) + 1

    return dict(
        total_entries=len(entries),
        total_hours=round(total_hours, 2),
        billable_hours=round(billable_hours, 2),
        non_billable_hours=round(total_hours - billable_hours, 2),
        unique_users=unique_users,
        total_days=total_days,
        average_hours_per_entry=round(_ratio(total_hours, len(entries)), 2),
        average_hours_per_user_per_day=round(avg_per_user_day, 2),
        expected_hours_per_day=expected_hours_per_day,
        compliance_rate=_capped_percent(avg_per_user_day, expected_hours_per_day),
        utilization_rate=_capped_percent(total_hours, capacity),
        overtime_hours=round(overtime, 2),
        completed_entries=completed,
        completion_rate=round(_ratio(completed, len(entries)) * 100, 2),
        billable_rate=round(_ratio(billable_hours, total_hours) * 100, 2),
        status_breakdown=status_breakdown,
        priority_breakdown=priority_breakdown,
    )


def summarize(entries: Iterable, expected_hours_per_day: float = DEFAULT_EXPECTED_HOURS) -> Summary:
    return Summary(**_metrics(list(entries), expected_hours_per_day))


def _group(entries: Iterable, key: Callable) -> Dict[object, List]:
    groups: Dict[object, List] = defaultdict(list)
    for e in entries:
        groups[key(e)].append(e)
    return groups


def by_department(entries: Iterable, expected_hours_per_day: float = DEFAULT_EXPECTED_HOURS) -> List[DepartmentSummary]:
    rows = [
        DepartmentSummary(department=department, **_metrics(group, expected_hours_per_day))
        for department, group in _group(entries, lambda e: e.department).items()
    ]
    return sorted(rows, key=lambda row: (-row.total_hours, row.department))


def by_user(entries: Iterable, expected_hours_per_day: float = DEFAULT_EXPECTED_HOURS) -> List[UserSummary]:
    rows = [
        UserSummary(user_id=user_id, **_metrics(group, expected_hours_per_day))
        for user_id, group in _group(entries, lambda e: e.user_id).items()
    ]
    return sorted(rows, key=lambda row: (-row.total_hours, row.user_id))


def bucket_key(entry_date, granularity: str) -> str:
    if granularity == "daily":
        return entry_date.isoformat()
    if granularity == "weekly":
        year, week, _ = entry_date.isocalendar()
        return f"{year}-W{week:02d}"
    if granularity == "monthly":
        return entry_date.strftime("%Y-%m")
    raise ValueError(f"Unknown granularity '{granularity}', expected one of {', '.join(GRANULARITIES)}")


def trend_direction(current: float, previous: float) -> str:
    if current > previous * (1 + TREND_DEADBAND):
        return "up"
    if current < previous * (1 - TREND_DEADBAND):
        return "down"
    return "stable"


def trend_series(
    entries: Iterable,
    granularity: str = "weekly",
    expected_hours_per_day: float = DEFAULT_EXPECTED_HOURS,
) -> List[TrendBucket]:
    """
    One bucket per period that has entries, oldest first. Each bucket gets a
    weighted score (0.4 hours/entry, 0.4 completion %, 0.2 billable %) and a
    trend against the bucket before it.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity '{granularity}', expected one of {', '.join(GRANULARITIES)}")

    groups = _group(entries, lambda e: bucket_key(e.date, granularity))
    buckets: List[TrendBucket] = []
    previous_score = None
    for period in sorted(groups):
        metrics = _metrics(groups[period], expected_hours_per_day)
        hours_per_entry = metrics["average_hours_per_entry"]
        score = round(
            0.4 * hours_per_entry + 0.4 * metrics["completion_rate"] + 0.2 * metrics["billable_rate"], 2
        )
        trend = "stable" if previous_score is None else trend_direction(score, previous_score)
        buckets.append(TrendBucket(period=period, hours_per_entry=hours_per_entry, score=score, trend=trend, **metrics))
        previous_score = score
    return buckets
