# timesheet-backend/app/api/v1/endpoints/settings.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db import models, session
from app.core import security
from app.schemas import settings as settings_schema

router = APIRouter()


def find_settings(db: Session, user: models.User) -> models.UserSettings | None:
    return db.query(models.UserSettings).filter(models.UserSettings.user_id == user.id).first()


@router.get("", response_model=settings_schema.UserSettings)
def read_settings(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ The caller's settings, or the defaults if none were ever saved. """
    return find_settings(db, current_user) or settings_schema.UserSettings()


@router.put("", response_model=settings_schema.UserSettings)
def update_settings(
    updates: settings_schema.SettingsUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Partial update; the settings row is created on first write. """
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid settings provided")

    user_settings = find_settings(db, current_user)
    if user_settings is None:
        defaults = settings_schema.UserSettings().model_dump(exclude={"created_at", "updated_at"})
        user_settings = models.UserSettings(user_id=current_user.id, **defaults)
        db.add(user_settings)
    for field, value in update_data.items():
        setattr(user_settings, field, value)
    db.commit()
    db.refresh(user_settings)
    return user_settings


@router.delete("", response_model=settings_schema.UserSettings)
def reset_settings(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Drops any saved settings and returns the defaults. """
    db.query(models.UserSettings).filter(models.UserSettings.user_id == current_user.id).delete()
    db.commit()
    return settings_schema.UserSettings()
