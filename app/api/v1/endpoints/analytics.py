# timesheet-backend/app/api/v1/endpoints/analytics.py
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db import models, session
from app.core import security
from app.schemas import analytics as analytics_schema
from app.services import analytics
from app.services.scope import AccessScope, resolve_scope, scoped_entries

router = APIRouter()

DEFAULT_RANGE_DAYS = 30


# --- Helper Functions ---

@dataclass
class ReportParams:
    start_date: date
    end_date: date
    department: Optional[str]
    expected_hours_per_day: float


def report_params(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    department: Optional[str] = None,
    expected_hours_per_day: Optional[float] = Query(None, alias="expectedHoursPerDay", gt=0, le=24),
) -> ReportParams:
    """Common analytics query parameters; the range defaults to the last 30 days."""
    end = end_date or date.today()
    start = start_date or end - timedelta(days=DEFAULT_RANGE_DAYS)
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="startDate must not be after endDate")
    return ReportParams(
        start_date=start,
        end_date=end,
        department=department,
        expected_hours_per_day=expected_hours_per_day or settings.EXPECTED_HOURS_PER_DAY,
    )


def load_entries(db: Session, scope: AccessScope, params: ReportParams) -> list:
    query = scoped_entries(db, scope, params.start_date, params.end_date)
    return session.with_store_retry(db, query.all)


def date_range(params: ReportParams) -> analytics_schema.DateRange:
    return analytics_schema.DateRange(start_date=params.start_date, end_date=params.end_date)


# --- API Endpoints ---

@router.get("/summary", response_model=analytics_schema.SummaryReport)
def read_summary(
    params: ReportParams = Depends(report_params),
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Headline metrics for everything the caller can see in the range. """
    scope = resolve_scope(current_user, params.department)
    entries = load_entries(db, scope, params)
    return analytics_schema.SummaryReport(
        scope=scope.describe(),
        range=date_range(params),
        summary=analytics.summarize(entries, params.expected_hours_per_day),
    )


@router.get("/departments", response_model=analytics_schema.DepartmentReport)
def read_department_breakdown(
    params: ReportParams = Depends(report_params),
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ The same metrics split by the department each entry was logged under. """
    scope = resolve_scope(current_user, params.department)
    entries = load_entries(db, scope, params)
    return analytics_schema.DepartmentReport(
        scope=scope.describe(),
        range=date_range(params),
        departments=analytics.by_department(entries, params.expected_hours_per_day),
    )


@router.get("/users", response_model=analytics_schema.UserReport)
def read_user_breakdown(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    params: ReportParams = Depends(report_params),
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Per-user metrics, busiest users first, paged. """
    scope = resolve_scope(current_user, params.department)
    entries = load_entries(db, scope, params)
    owners = {entry.user_id: entry.owner for entry in entries}

    rows = analytics.by_user(entries, params.expected_hours_per_day)
    for row in rows:
        row.email = owners[row.user_id].email
        row.name = owners[row.user_id].full_name

    total = len(rows)
    return analytics_schema.UserReport(
        scope=scope.describe(),
        range=date_range(params),
        users=rows[(page - 1) * limit: page * limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get("/trends", response_model=analytics_schema.TrendReport)
def read_trends(
    granularity: Literal["daily", "weekly", "monthly"] = "weekly",
    params: ReportParams = Depends(report_params),
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Metrics per day, ISO week or month with an up/down/stable trend marker. """
    scope = resolve_scope(current_user, params.department)
    entries = load_entries(db, scope, params)
    return analytics_schema.TrendReport(
        scope=scope.describe(),
        range=date_range(params),
        granularity=granularity,
        buckets=analytics.trend_series(entries, granularity, params.expected_hours_per_day),
    )


@router.get("/date-range", response_model=analytics_schema.AvailableDates)
def read_available_dates(
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Earliest and latest entry dates the caller can see. """
    scope = resolve_scope(current_user, department)
    earliest, latest = db.query(
        func.min(models.TimesheetEntry.date), func.max(models.TimesheetEntry.date)
    ).filter(scope.entry_clause()).one()
    return analytics_schema.AvailableDates(earliest=earliest, latest=latest)


@router.get("/department-users", response_model=List[analytics_schema.DepartmentUser])
def read_department_users(
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    """ Users to filter reports by, active or not. """
    scope = resolve_scope(manager, department)
    users = (
        db.query(models.User)
        .filter(scope.user_clause())
        .order_by(models.User.last_name, models.User.first_name)
        .all()
    )
    return [
        analytics_schema.DepartmentUser(id=user.id, name=user.full_name, email=user.email, active=user.is_active)
        for user in users
    ]


@router.get("/department-projects", response_model=List[analytics_schema.DepartmentProject])
def read_department_projects(
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    """
    Distinct client file / task pairs logged in scope. A project is active
    when it was worked on within the last 30 days.
    """
    scope = resolve_scope(manager, department)
    rows = (
        db.query(
            models.TimesheetEntry.client_file_number,
            models.TimesheetEntry.task,
            func.max(models.TimesheetEntry.date),
        )
        .filter(scope.entry_clause())
        .group_by(models.TimesheetEntry.client_file_number, models.TimesheetEntry.task)
        .all()
    )
    cutoff = date.today() - timedelta(days=DEFAULT_RANGE_DAYS)
    projects = [
        analytics_schema.DepartmentProject(
            client_file_number=client_file_number,
            task=task,
            description=f"{client_file_number} - {task}",
            last_used=last_used,
            active=last_used >= cutoff,
        )
        for client_file_number, task, last_used in rows
    ]
    return sorted(projects, key=lambda p: (not p.active, p.client_file_number, p.task))
