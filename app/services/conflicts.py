# timesheet-backend/app/services/conflicts.py
import logging
from datetime import date, time
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidTimeGranularity, InvalidTimeRange, OverlappingEntry
from app.db import models

logger = logging.getLogger(__name__)

SLOT_MINUTES = 15


def overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Half-open interval overlap: touching endpoints do not count."""
    return a_start < b_end and b_start < a_end


def check_granularity(start_time: time, end_time: time) -> None:
    for field, value in (("start_time", start_time), ("end_time", end_time)):
        if value.minute % SLOT_MINUTES != 0 or value.second != 0 or value.microsecond != 0:
            raise InvalidTimeGranularity(
                f"{field} must be on a {SLOT_MINUTES}-minute boundary",
                field=field,
                value=value.strftime("%H:%M:%S"),
            )


def check_time_range(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise InvalidTimeRange(
            "end_time must be after start_time",
            field="end_time",
            start_time=start_time.strftime("%H:%M"),
            end_time=end_time.strftime("%H:%M"),
        )


def find_conflict(start_time: time, end_time: time, existing: Iterable) -> Optional[models.TimesheetEntry]:
    for entry in existing:
        if overlaps(start_time, end_time, entry.start_time, entry.end_time):
            return entry
    return None


def describe_conflict(entry) -> dict:
    return {
        "date": entry.date.isoformat(),
        "start_time": entry.start_time.strftime("%H:%M"),
        "end_time": entry.end_time.strftime("%H:%M"),
        "client_file_number": entry.client_file_number,
        "task": entry.task,
        "activity": entry.activity,
    }


def validate_entry(
    db: Session,
    user_id: int,
    entry_date: date,
    start_time: time,
    end_time: time,
    exclude_id: Optional[int] = None,
) -> None:
    """
    Rejects a candidate interval that is off-grid, empty, or overlaps another
    entry of the same user on the same day. The caller must perform the write
    in the same transaction: the owner's row stays locked until commit.
    """
    check_granularity(start_time, end_time)
    check_time_range(start_time, end_time)

    # Serializes concurrent writers for one user on databases with row locks
    db.query(models.User.id).filter(models.User.id == user_id).with_for_update().first()

    query = db.query(models.TimesheetEntry).filter(
        models.TimesheetEntry.user_id == user_id,
        models.TimesheetEntry.date == entry_date,
    )
    if exclude_id is not None:
        query = query.filter(models.TimesheetEntry.id != exclude_id)

    conflict = find_conflict(start_time, end_time, query.order_by(models.TimesheetEntry.start_time).all())
    if conflict is not None:
        logger.info(
            "Rejected overlapping entry for user %s on %s (%s-%s) against entry %s",
            user_id, entry_date, start_time, end_time, conflict.id,
        )
        raise OverlappingEntry(describe_conflict(conflict))
