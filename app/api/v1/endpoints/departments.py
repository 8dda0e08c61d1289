# timesheet-backend/app/api/v1/endpoints/departments.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFound
from app.db import models, session
from app.core import security
from app.schemas import department as department_schema

logger = logging.getLogger(__name__)

router = APIRouter()


def get_department_or_404(db: Session, department_id: int) -> models.Department:
    department = db.query(models.Department).filter(models.Department.id == department_id).first()
    if department is None:
        raise NotFound("Department not found")
    return department


def ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(models.Department).filter(models.Department.name == name)
    if exclude_id is not None:
        query = query.filter(models.Department.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department already exists")


@router.get("", response_model=List[department_schema.Department])
def list_departments(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ All departments with their tasks, alphabetically. """
    return (
        db.query(models.Department)
        .options(selectinload(models.Department.tasks))
        .order_by(models.Department.name)
        .all()
    )


@router.get("/{department_id}", response_model=department_schema.Department)
def read_department(
    department_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    return get_department_or_404(db, department_id)


@router.post("", response_model=department_schema.Department, status_code=status.HTTP_201_CREATED)
def create_department(
    department_in: department_schema.DepartmentCreate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    ensure_unique_name(db, department_in.name)
    department = models.Department(
        name=department_in.name,
        description=department_in.description or "",
        is_active=department_in.is_active,
    )
    db.add(department)
    db.commit()
    db.refresh(department)
    logger.info("Admin %s created department %s", admin.email, department.name)
    return department


@router.put("/{department_id}", response_model=department_schema.Department)
def update_department(
    department_id: int,
    updates: department_schema.DepartmentUpdate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    department = get_department_or_404(db, department_id)
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields provided for update")
    if "name" in update_data:
        ensure_unique_name(db, update_data["name"], exclude_id=department.id)
    for field, value in update_data.items():
        setattr(department, field, value)
    db.commit()
    db.refresh(department)
    return department


@router.delete("/{department_id}", response_model=department_schema.Department)
def delete_department(
    department_id: int,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Soft-deletes a department and deactivates every task under it. """
    department = get_department_or_404(db, department_id)
    department.is_active = False
    for task in department.tasks:
        task.is_active = False
    db.commit()
    db.refresh(department)
    logger.info("Admin %s deactivated department %s and %d tasks", admin.email, department.name, len(department.tasks))
    return department


@router.post("/bulk-upload", response_model=department_schema.BulkUploadResult)
def bulk_upload_departments(
    upload: department_schema.BulkUpload,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """
    Creates departments and their tasks in one transaction. Departments that
    already exist are reused, and tasks already present under a department
    are skipped.
    """
    result = department_schema.BulkUploadResult(total_departments=len(upload.departments))
    for item in upload.departments:
        department = db.query(models.Department).filter(models.Department.name == item.name).first()
        if department is None:
            department = models.Department(
                name=item.name, description=item.description or "", is_active=item.is_active,
            )
            db.add(department)
            db.flush()
            result.departments_created += 1
            detail = department_schema.BulkDepartmentResult(name=item.name, status="created")
        else:
            result.departments_skipped += 1
            detail = department_schema.BulkDepartmentResult(name=item.name, status="skipped")

        result.total_tasks += len(item.tasks)
        for task_in in item.tasks:
            exists = db.query(models.Task.id).filter(
                models.Task.department_id == department.id, models.Task.name == task_in.name
            ).first()
            if exists:
                result.tasks_skipped += 1
                detail.tasks.append(department_schema.BulkTaskResult(name=task_in.name, status="skipped"))
                continue
            db.add(models.Task(
                department_id=department.id, name=task_in.name,
                description=task_in.description or "", is_active=task_in.is_active,
            ))
            db.flush()
            result.tasks_created += 1
            detail.tasks.append(department_schema.BulkTaskResult(name=task_in.name, status="created"))
        result.details.append(detail)

    db.commit()
    logger.info(
        "Admin %s bulk uploaded %d departments (%d new) and %d tasks (%d new)",
        admin.email, result.total_departments, result.departments_created,
        result.total_tasks, result.tasks_created,
    )
    return result
