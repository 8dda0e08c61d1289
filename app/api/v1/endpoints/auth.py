# timesheet-backend/app/api/v1/endpoints/auth.py
import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.db import session, models
from app.core import security
from app.schemas import token as token_schema

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_token(db: Session, user: models.User) -> dict:
    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    logger.info("User %s logged in", user.email)
    access_token = security.create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"access_token": access_token, "token_type": "bearer", "user": user}


@router.post("/token", response_model=token_schema.Token)
def login_form(db: Session = Depends(session.get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = security.authenticate_user(db, form_data.username, form_data.password)
    return _issue_token(db, user)


@router.post("/login", response_model=token_schema.Token)
def login(credentials: token_schema.LoginRequest, db: Session = Depends(session.get_db)):
    user = security.authenticate_user(db, credentials.email, credentials.password)
    return _issue_token(db, user)
