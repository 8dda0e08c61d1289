# timesheet-backend/app/schemas/department.py
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class TaskBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = ""

class TaskCreate(TaskBase):
    department: str = Field(min_length=1)

class TaskUpdate(BaseModel):
    department: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class Task(TaskBase):
    id: int
    department_id: int
    department_name: str
    is_active: bool

    class Config:
        from_attributes = True

class DepartmentBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = ""

class DepartmentCreate(DepartmentBase):
    is_active: bool = True

class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class Department(DepartmentBase):
    id: int
    is_active: bool
    tasks: List[Task] = []

    class Config:
        from_attributes = True

class BulkTask(TaskBase):
    is_active: bool = True

class BulkDepartment(DepartmentBase):
    is_active: bool = True
    tasks: List[BulkTask] = []

class BulkUpload(BaseModel):
    departments: List[BulkDepartment] = Field(min_length=1)

class BulkTaskResult(BaseModel):
    name: str
    status: Literal["created", "skipped"]

class BulkDepartmentResult(BaseModel):
    name: str
    status: Literal["created", "skipped"]
    tasks: List[BulkTaskResult] = []

class BulkUploadResult(BaseModel):
    total_departments: int = 0
    departments_created: int = 0
    departments_skipped: int = 0
    total_tasks: int = 0
    tasks_created: int = 0
    tasks_skipped: int = 0
    details: List[BulkDepartmentResult] = []
