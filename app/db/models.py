# timesheet-backend/app/db/models.py
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Date, Time, Text, Boolean, JSON,
    CheckConstraint,
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

ROLES = ("ADMIN", "SUPERVISOR", "STAFF")
PRIORITIES = ("Low", "Medium", "High", "Critical")
STATUSES = ("NotStarted", "CarriedOut", "Completed")


def _seconds(value) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(20), nullable=False)
    department = Column(String(100), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)
    __table_args__ = ( CheckConstraint("role IN ('ADMIN', 'SUPERVISOR', 'STAFF')"), )
    entries = relationship("TimesheetEntry", back_populates="owner")
    settings = relationship("UserSettings", back_populates="owner", uselist=False)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Department(Base):
    __tablename__ = "departments"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    tasks = relationship("Task", back_populates="department", order_by="Task.name")


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    department = relationship("Department", back_populates="tasks")

    @property
    def department_name(self) -> str:
        return self.department.name


class TimesheetEntry(Base):
    __tablename__ = "timesheet_entries"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    client_file_number = Column(String(100), nullable=False)
    # Snapshot of the owner's department when the entry was created
    department = Column(String(100), nullable=False, index=True)
    task = Column(String(150), nullable=False)
    activity = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False)
    billable = Column(Boolean, nullable=False, default=False)
    comments = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    __table_args__ = (
        CheckConstraint("priority IN ('Low', 'Medium', 'High', 'Critical')"),
        CheckConstraint("status IN ('NotStarted', 'CarriedOut', 'Completed')"),
        CheckConstraint("start_time < end_time"),
    )
    owner = relationship("User", back_populates="entries")

    @property
    def total_hours(self) -> float:
        """Always derived from the interval, never stored."""
        return (_seconds(self.end_time) - _seconds(self.start_time)) / 3600


class UserSettings(Base):
    __tablename__ = "user_settings"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    theme = Column(String(10), nullable=False, default="dark")
    density = Column(String(20), nullable=False, default="comfortable")
    start_time = Column(String(5), nullable=False, default="08:00")
    end_time = Column(String(5), nullable=False, default="17:00")
    remember_filters = Column(Boolean, nullable=False, default=True)
    weekly_reminder = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    __table_args__ = (
        CheckConstraint("theme IN ('light', 'dark')"),
        CheckConstraint("density IN ('comfortable', 'compact')"),
    )
    owner = relationship("User", back_populates="settings")


class CustomReport(Base):
    __tablename__ = "custom_reports"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    department = Column(String(100), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    filters = Column(JSON, nullable=False, default=dict)
    columns = Column(JSON, nullable=False, default=list)
    schedule = Column(String(20), nullable=False, default="manual")
    recipients = Column(JSON, nullable=False, default=list)
    last_run = Column(DateTime, nullable=True)
    next_run = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)
    owner = relationship("User")
