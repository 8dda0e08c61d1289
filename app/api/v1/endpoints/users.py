# timesheet-backend/app/api/v1/endpoints/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db import models, session
from app.core import security
from app.schemas import user as user_schema
from app.services.scope import resolve_scope

router = APIRouter()

@router.get("", response_model=List[user_schema.User])
def list_visible_users(
    department: Optional[str] = None,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """
    Users the caller may report on: everyone (or one department) for ADMIN,
    the supervisor's department, or just the caller for STAFF.
    """
    scope = resolve_scope(current_user, department)
    return (
        db.query(models.User)
        .filter(scope.user_clause(), models.User.is_active.is_(True))
        .order_by(models.User.last_name, models.User.first_name)
        .all()
    )

@router.get("/me", response_model=user_schema.User)
def read_user_me(current_user: models.User = Depends(security.get_current_user)):
    """
    Get the details for the currently logged-in user.
    """
    return current_user

@router.put("/me", response_model=user_schema.User)
def update_user_me(
    updates: user_schema.ProfileUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Updates the caller's own name. Role and department are admin-managed. """
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid updates provided")
    for field, value in update_data.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user

@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def update_user_password(
    passwords: user_schema.PasswordUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """
    Allows a logged-in user to change their own password.
    """
    if not security.verify_password(passwords.current_password, current_user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Incorrect current password")

    current_user.hashed_password = security.get_password_hash(passwords.new_password)
    db.commit()
    return
