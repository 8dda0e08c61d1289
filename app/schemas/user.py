# timesheet-backend/app/schemas/user.py
from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional
from datetime import datetime

Role = Literal["ADMIN", "SUPERVISOR", "STAFF"]


class UserBase(BaseModel):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=8)
    role: Role
    department: str = Field(min_length=1)

class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2)
    last_name: Optional[str] = Field(default=None, min_length=2)
    role: Optional[Role] = None
    department: Optional[str] = Field(default=None, min_length=1)

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2)
    last_name: Optional[str] = Field(default=None, min_length=2)

class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)

class PasswordReset(BaseModel):
    new_password: str = Field(min_length=8)

class User(UserBase):
    id: int
    role: str
    department: str
    is_active: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserCompliance(User):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    last_entry_date: Optional[datetime] = None
