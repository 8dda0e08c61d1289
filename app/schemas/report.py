# timesheet-backend/app/schemas/report.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.schemas.analytics import SummaryReport


class ReportBase(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    filters: Dict[str, Any] = Field(default_factory=dict)
    columns: List[str] = Field(default_factory=list)
    schedule: str = "manual"
    recipients: List[str] = Field(default_factory=list)

class ReportCreate(ReportBase):
    pass

class ReportUpdate(ReportBase):
    pass

class Report(ReportBase):
    id: int
    user_id: int
    department: str
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReportRun(BaseModel):
    report: Report
    result: SummaryReport
