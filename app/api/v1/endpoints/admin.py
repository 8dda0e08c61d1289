# timesheet-backend/app/api/v1/endpoints/admin.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db import models, session
from app.core import security
from app.schemas import user as user_schema

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> models.User:
    db_user = db.query(models.User).filter(models.User.id == user_id).first()
    if not db_user:
        raise NotFound("User not found")
    return db_user

# --- API Endpoints ---

@router.post("/users", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: user_schema.UserCreate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Creates a new user profile. """
    email = user_in.email.lower()
    if db.query(models.User).filter(models.User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    db_user = models.User(
        email=email, first_name=user_in.first_name, last_name=user_in.last_name,
        hashed_password=security.get_password_hash(user_in.password),
        role=user_in.role, department=user_in.department, is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Admin %s created user %s (%s, %s)", admin.email, db_user.email, db_user.role, db_user.department)
    return db_user

@router.get("/users", response_model=List[user_schema.User])
def get_all_users(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Retrieves a list of all users, active or not. """
    return db.query(models.User).order_by(models.User.created_at.desc(), models.User.id.desc()).all()

@router.put("/users/{user_id}", response_model=user_schema.User)
def update_user_details(
    user_id: int,
    updates: user_schema.UserUpdate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """
    Updates a user's name, role, or department. Existing timesheet entries keep
    the department they were logged under.
    """
    db_user = _get_user_or_404(db, user_id)
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid updates provided")
    for field, value in update_data.items():
        setattr(db_user, field, value)

    db.commit()
    db.refresh(db_user)
    return db_user

@router.put("/users/{user_id}/toggle-status", response_model=user_schema.User)
def toggle_user_status(
    user_id: int,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Activates or deactivates a user. Users are never hard-deleted. """
    db_user = _get_user_or_404(db, user_id)
    if db_user.id == admin.id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You cannot deactivate your own account")
    db_user.is_active = not db_user.is_active
    db.commit()
    db.refresh(db_user)
    logger.info("Admin %s %s user %s", admin.email, "activated" if db_user.is_active else "deactivated", db_user.email)
    return db_user

@router.put("/users/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def reset_user_password(
    user_id: int,
    password_in: user_schema.PasswordReset,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Resets any user's password. """
    db_user = _get_user_or_404(db, user_id)
    db_user.hashed_password = security.get_password_hash(password_in.new_password)
    db.commit()
    return
