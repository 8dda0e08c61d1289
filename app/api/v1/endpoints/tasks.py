# timesheet-backend/app/api/v1/endpoints/tasks.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db import models, session
from app.core import security
from app.schemas import department as department_schema

router = APIRouter()


def department_by_name(db: Session, name: str) -> models.Department:
    department = db.query(models.Department).filter(models.Department.name == name).first()
    if department is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid department")
    return department


def get_manageable_task(db: Session, task_id: int, user: models.User) -> models.Task:
    """Supervisors may only manage tasks of their own department."""
    task = db.query(models.Task).filter(models.Task.id == task_id).first()
    if task is None:
        raise NotFound("Task not found")
    if user.role == "SUPERVISOR" and task.department.name != user.department:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only manage tasks in your own department",
        )
    return task


@router.get("/by-department/{department}", response_model=List[department_schema.Task])
def list_department_tasks(
    department: str,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Active tasks of one department, for picking while logging time. """
    return (
        db.query(models.Task)
        .join(models.Department)
        .filter(models.Department.name == department, models.Task.is_active.is_(True))
        .order_by(models.Task.name)
        .all()
    )


@router.get("", response_model=List[department_schema.Task])
def list_tasks(
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    """ All tasks; supervisors are pinned to their own department. """
    if manager.role == "SUPERVISOR":
        department = manager.department
    query = db.query(models.Task).join(models.Department)
    if department:
        query = query.filter(models.Department.name == department)
    return query.order_by(models.Department.name, models.Task.name).all()


@router.post("", response_model=department_schema.Task, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: department_schema.TaskCreate,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    if manager.role == "SUPERVISOR" and task_in.department != manager.department:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only create tasks for your own department",
        )
    department = department_by_name(db, task_in.department)
    task = models.Task(department_id=department.id, name=task_in.name, description=task_in.description or "")
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.put("/{task_id}", response_model=department_schema.Task)
def update_task(
    task_id: int,
    updates: department_schema.TaskUpdate,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    task = get_manageable_task(db, task_id, manager)
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields provided for update")

    department_name = update_data.pop("department", None)
    if department_name is not None:
        if manager.role == "SUPERVISOR" and department_name != manager.department:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You cannot change the department of a task",
            )
        task.department_id = department_by_name(db, department_name).id

    for field, value in update_data.items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}", response_model=department_schema.Task)
def delete_task(
    task_id: int,
    db: Session = Depends(session.get_db),
    manager: models.User = Depends(security.get_current_supervisor_user)
):
    """ Soft delete. """
    task = get_manageable_task(db, task_id, manager)
    task.is_active = False
    db.commit()
    db.refresh(task)
    return task
