# timesheet-backend/app/api/v1/endpoints/timesheet.py
import logging
import math
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db import models, session
from app.core import security
from app.schemas import timesheet as timesheet_schema
from app.schemas import user as user_schema
from app.services import conflicts, export
from app.services.scope import resolve_scope, scoped_entries

logger = logging.getLogger(__name__)

router = APIRouter()

SORT_COLUMNS = {
    "date": models.TimesheetEntry.date,
    "created_at": models.TimesheetEntry.created_at,
    "start_time": models.TimesheetEntry.start_time,
    "status": models.TimesheetEntry.status,
    "priority": models.TimesheetEntry.priority,
}


# --- Helper Functions ---

def time_intervals() -> list[str]:
    return [f"{hour:02d}:{minute:02d}" for hour in range(24) for minute in range(0, 60, conflicts.SLOT_MINUTES)]


def get_owned_entry(db: Session, entry_id: int, owner: models.User) -> models.TimesheetEntry:
    # Entries of other users are reported as missing, not forbidden
    entry = db.query(models.TimesheetEntry).filter(
        models.TimesheetEntry.id == entry_id,
        models.TimesheetEntry.user_id == owner.id,
    ).first()
    if entry is None:
        raise NotFound("Timesheet entry not found")
    return entry


# --- API Endpoints ---

@router.get("/entries", response_model=timesheet_schema.EntryPage)
def list_entries(
    page: int = Query(1, ge=1),
    limit: int = Query(5, ge=1, le=100),
    search: Optional[str] = None,
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    entry_status: Optional[timesheet_schema.Status] = Query(None, alias="status"),
    priority: Optional[timesheet_schema.Priority] = None,
    billable: Optional[bool] = None,
    department: Optional[str] = None,
    user_email: Optional[str] = Query(None, alias="userEmail"),
    sort_by: Literal["date", "created_at", "start_time", "status", "priority"] = Query("date", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Lists the entries the caller may see, filtered, sorted and paged. """
    scope = resolve_scope(current_user, department)
    query = scoped_entries(db, scope, date_from, date_to)

    if search:
        term = f"%{search}%"
        query = query.filter(or_(
            models.TimesheetEntry.client_file_number.ilike(term),
            models.TimesheetEntry.department.ilike(term),
            models.TimesheetEntry.task.ilike(term),
            models.TimesheetEntry.activity.ilike(term),
            models.User.first_name.ilike(term),
            models.User.last_name.ilike(term),
        ))
    if entry_status:
        query = query.filter(models.TimesheetEntry.status == entry_status)
    if priority:
        query = query.filter(models.TimesheetEntry.priority == priority)
    if billable is not None:
        query = query.filter(models.TimesheetEntry.billable.is_(billable))
    if user_email:
        query = query.filter(models.User.email == user_email.lower())

    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()

    def fetch():
        total = query.count()
        rows = (
            query.order_by(ordering, models.TimesheetEntry.created_at.desc(), models.TimesheetEntry.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return total, rows

    total, rows = session.with_store_retry(db, fetch)
    return {
        "entries": rows, "total": total, "page": page, "limit": limit,
        "total_pages": math.ceil(total / limit),
    }


@router.get("/entries/{entry_id}", response_model=timesheet_schema.Entry)
def read_entry(
    entry_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Returns one entry if it is within the caller's scope. """
    scope = resolve_scope(current_user)
    entry = scoped_entries(db, scope).filter(models.TimesheetEntry.id == entry_id).first()
    if entry is None:
        raise NotFound("Timesheet entry not found")
    return entry


@router.post("/entries", response_model=timesheet_schema.Entry, status_code=status.HTTP_201_CREATED)
def create_entry(
    entry_in: timesheet_schema.EntryCreate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """
    Logs time for the caller. The entry records the caller's current
    department and must not overlap any of their entries that day.
    """
    conflicts.validate_entry(db, current_user.id, entry_in.date, entry_in.start_time, entry_in.end_time)

    entry = models.TimesheetEntry(
        user_id=current_user.id,
        department=current_user.department,
        **entry_in.model_dump(exclude={"comments"}),
        comments=entry_in.comments or "",
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.put("/entries/{entry_id}", response_model=timesheet_schema.Entry)
def update_entry(
    entry_id: int,
    entry_in: timesheet_schema.EntryUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Replaces one of the caller's own entries. """
    entry = get_owned_entry(db, entry_id, current_user)
    conflicts.validate_entry(
        db, current_user.id, entry_in.date, entry_in.start_time, entry_in.end_time, exclude_id=entry.id
    )

    for field, value in entry_in.model_dump().items():
        setattr(entry, field, value)
    entry.comments = entry_in.comments or ""
    db.commit()
    db.refresh(entry)
    return entry


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Hard-deletes one of the caller's own entries. """
    entry = get_owned_entry(db, entry_id, current_user)
    db.delete(entry)
    db.commit()
    return


@router.get("/time-intervals", response_model=timesheet_schema.TimeIntervals)
def read_time_intervals():
    """ The quarter-hour slots a start or end time may take. """
    return {"intervals": time_intervals()}


@router.get("/export")
def export_entries(
    date_from: Optional[date] = Query(None, alias="startDate"),
    date_to: Optional[date] = Query(None, alias="endDate"),
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Dumps the caller's visible entries as CSV, newest first. """
    scope = resolve_scope(current_user, department)
    query = scoped_entries(db, scope, date_from, date_to).order_by(
        models.TimesheetEntry.date.desc(), models.User.last_name, models.User.first_name,
        models.TimesheetEntry.start_time,
    )
    rows = session.with_store_retry(db, query.all)

    label = scope.describe().replace(":", "_")
    period = f"{date_from or 'start'}_to_{date_to or 'now'}"
    logger.info("User %s exported %d entries (%s)", current_user.email, len(rows), scope.describe())
    return Response(
        content=export.entries_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{label}_Report_{period}.csv"'},
    )


@router.get("/users-compliance", response_model=List[user_schema.UserCompliance])
def read_users_compliance(
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    """
    Active non-admin users with the time of their most recent entry, for
    spotting who has stopped logging. Supervisors see their own department.
    """
    scope = resolve_scope(manager)
    rows = (
        db.query(models.User, func.max(models.TimesheetEntry.created_at))
        .outerjoin(models.TimesheetEntry, models.TimesheetEntry.user_id == models.User.id)
        .filter(scope.user_clause(), models.User.role != "ADMIN", models.User.is_active.is_(True))
        .group_by(models.User.id)
        .order_by(models.User.department, models.User.first_name, models.User.last_name)
        .all()
    )
    return [
        user_schema.UserCompliance.model_validate(user).model_copy(update={"last_entry_date": last_entry})
        for user, last_entry in rows
    ]
