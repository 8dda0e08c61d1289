# timesheet-backend/app/services/scope.py
"""
Role-based row visibility.

ADMIN sees everything (or one department when asked), SUPERVISOR sees their
own department, STAFF sees only their own rows. Every endpoint that reads
entries, users or reports resolves an AccessScope once and applies it either
as a SQL clause or as an in-memory filter; both paths select the same rows.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import true
from sqlalchemy.orm import joinedload

from app.core.errors import UnknownRole
from app.db import models

logger = logging.getLogger(__name__)

ALL = "all"
DEPARTMENT = "department"
USER = "user"


@dataclass(frozen=True)
class AccessScope:
    kind: str
    department: Optional[str] = None
    user_id: Optional[int] = None

    def matches(self, row) -> bool:
        """In-memory predicate over anything with `department` and `user_id`."""
        if self.kind == ALL:
            return True
        if self.kind == DEPARTMENT:
            return row.department == self.department
        return row.user_id == self.user_id

    def filter(self, rows: Iterable) -> List:
        return [row for row in rows if self.matches(row)]

    def entry_clause(self):
        if self.kind == ALL:
            return true()
        if self.kind == DEPARTMENT:
            return models.TimesheetEntry.department == self.department
        return models.TimesheetEntry.user_id == self.user_id

    def user_clause(self):
        if self.kind == ALL:
            return true()
        if self.kind == DEPARTMENT:
            return models.User.department == self.department
        return models.User.id == self.user_id

    def report_clause(self):
        if self.kind == ALL:
            return true()
        if self.kind == DEPARTMENT:
            return models.CustomReport.department == self.department
        return models.CustomReport.user_id == self.user_id

    def describe(self) -> str:
        if self.kind == ALL:
            return "all"
        if self.kind == DEPARTMENT:
            return f"department:{self.department}"
        return f"user:{self.user_id}"


def resolve_scope(caller, department: Optional[str] = None) -> AccessScope:
    """
    Maps the caller's role to the rows they may see.
    The department override is only honored for ADMIN callers.
    """
    if caller.role == "ADMIN":
        if department:
            return AccessScope(kind=DEPARTMENT, department=department)
        return AccessScope(kind=ALL)
    if caller.role == "SUPERVISOR":
        return AccessScope(kind=DEPARTMENT, department=caller.department)
    if caller.role == "STAFF":
        return AccessScope(kind=USER, user_id=caller.id)

    logger.error("Refusing scope for user %s with unknown role %r", getattr(caller, "id", None), caller.role)
    raise UnknownRole(caller.role)


def scoped_entries(db, scope: AccessScope, date_from=None, date_to=None):
    """Query of the entries visible under `scope`, owners joined for filtering and display."""
    query = (
        db.query(models.TimesheetEntry)
        .join(models.User, models.User.id == models.TimesheetEntry.user_id)
        .options(joinedload(models.TimesheetEntry.owner))
        .filter(scope.entry_clause())
    )
    if date_from:
        query = query.filter(models.TimesheetEntry.date >= date_from)
    if date_to:
        query = query.filter(models.TimesheetEntry.date <= date_to)
    return query
