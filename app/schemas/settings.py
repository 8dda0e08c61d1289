# timesheet-backend/app/schemas/settings.py
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

CLOCK_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class SettingsUpdate(BaseModel):
    theme: Optional[Literal["light", "dark"]] = None
    density: Optional[Literal["comfortable", "compact"]] = None
    start_time: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)
    remember_filters: Optional[bool] = None
    weekly_reminder: Optional[bool] = None

class UserSettings(BaseModel):
    theme: str = "dark"
    density: str = "comfortable"
    start_time: str = "08:00"
    end_time: str = "17:00"
    remember_filters: bool = True
    weekly_reminder: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
