# timesheet-backend/app/schemas/timesheet.py
from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import List, Literal, Optional
from datetime import date as Date, datetime, time

Priority = Literal["Low", "Medium", "High", "Critical"]
Status = Literal["NotStarted", "CarriedOut", "Completed"]


class EntryBase(BaseModel):
    date: Date
    client_file_number: str = Field(min_length=1)
    task: str = Field(min_length=1)
    activity: str = Field(min_length=1)
    priority: Priority
    start_time: time
    end_time: time
    status: Status
    billable: bool
    comments: Optional[str] = ""

    @field_validator("start_time", "end_time")
    @classmethod
    def _wall_clock_only(cls, value: time) -> time:
        # Entries are local wall-clock slots; stored times carry no offset
        if value.tzinfo is not None:
            raise ValueError("time must not carry a UTC offset")
        return value

class EntryCreate(EntryBase):
    pass

class EntryUpdate(EntryBase):
    pass

class EntryOwner(BaseModel):
    id: int
    email: str
    full_name: str

    class Config:
        from_attributes = True

class Entry(EntryBase):
    id: int
    user_id: int
    department: str
    total_hours: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[EntryOwner] = None

    class Config:
        from_attributes = True

    @field_serializer("total_hours")
    def _round_hours(self, value: float) -> float:
        return round(value, 2)

    @field_serializer("start_time", "end_time")
    def _format_time(self, value: time) -> str:
        return value.strftime("%H:%M")

class EntryPage(BaseModel):
    entries: List[Entry]
    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")

class TimeIntervals(BaseModel):
    intervals: List[str]
