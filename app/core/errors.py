# timesheet-backend/app/core/errors.py
# Domain errors raised by the services and rendered by the handlers in main.py.
from typing import Any, Dict

from fastapi import status


class TimesheetError(Exception):
    """Base error carrying a stable kind string and an HTTP status."""

    kind = "TimesheetError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message, **self.extra}


class AuthenticationRequired(TimesheetError):
    kind = "AuthenticationRequired"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(TimesheetError):
    kind = "InvalidCredentials"
    status_code = status.HTTP_401_UNAUTHORIZED


class UnknownRole(TimesheetError):
    kind = "UnknownRole"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, role: Any):
        super().__init__(f"Unknown role '{role}'")
        self.role = role


class InvalidTimeRange(TimesheetError):
    kind = "InvalidTimeRange"
    status_code = 422


class InvalidTimeGranularity(TimesheetError):
    kind = "InvalidTimeGranularity"
    status_code = 422


class OverlappingEntry(TimesheetError):
    kind = "OverlappingEntry"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, conflict: Dict[str, Any]):
        super().__init__("Time entry overlaps with existing entry", overlappingEntry=conflict)
        self.conflict = conflict


class NotFound(TimesheetError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class StoreUnavailable(TimesheetError):
    kind = "StoreUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
