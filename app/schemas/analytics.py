# timesheet-backend/app/schemas/analytics.py
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional
from datetime import date


class Summary(BaseModel):
    total_entries: int = 0
    total_hours: float = 0
    billable_hours: float = 0
    non_billable_hours: float = 0
    unique_users: int = 0
    total_days: int = 0
    average_hours_per_entry: float = 0
    average_hours_per_user_per_day: float = 0
    expected_hours_per_day: float = 8
    compliance_rate: int = 0
    utilization_rate: int = 0
    overtime_hours: float = 0
    completed_entries: int = 0
    completion_rate: float = 0
    billable_rate: float = 0
    status_breakdown: Dict[str, int] = Field(default_factory=dict)
    priority_breakdown: Dict[str, int] = Field(default_factory=dict)

class DepartmentSummary(Summary):
    department: str

class UserSummary(Summary):
    user_id: int
    email: Optional[str] = None
    name: Optional[str] = None

class TrendBucket(Summary):
    period: str
    hours_per_entry: float = 0
    score: float = 0
    trend: Literal["up", "down", "stable"] = "stable"

class DateRange(BaseModel):
    start_date: date
    end_date: date

class SummaryReport(BaseModel):
    scope: str
    range: DateRange
    summary: Summary

class DepartmentReport(BaseModel):
    scope: str
    range: DateRange
    departments: List[DepartmentSummary]

class UserReport(BaseModel):
    scope: str
    range: DateRange
    users: List[UserSummary]
    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")

class TrendReport(BaseModel):
    scope: str
    range: DateRange
    granularity: str
    buckets: List[TrendBucket]

class AvailableDates(BaseModel):
    earliest: Optional[date] = None
    latest: Optional[date] = None

class DepartmentUser(BaseModel):
    id: int
    name: str
    email: str
    active: bool

class DepartmentProject(BaseModel):
    client_file_number: str
    task: str
    description: str
    last_used: date
    active: bool
