# timesheet-backend/app/core/security.py
# Handles password hashing, JWTs, and all role-checking dependencies.
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from passlib.context import CryptContext
from datetime import datetime, timedelta

from app.db import models, session
from app.core.config import settings
from app.core.errors import AuthenticationRequired, InvalidCredentials, UnknownRole
from app.schemas import token as token_schema

logger = logging.getLogger(__name__)

# --- Password Hashing ---
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
def verify_password(plain: str, hashed: str) -> bool: return pwd_context.verify(plain, hashed)
def get_password_hash(pwd: str) -> str: return pwd_context.hash(pwd)

# --- JWT Creation ---
def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def authenticate_user(db: Session, email: str, password: str) -> models.User:
    """Returns the active user for these credentials or raises InvalidCredentials."""
    user = db.query(models.User).filter(models.User.email == email.lower()).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials("Invalid email or password")
    if not user.is_active:
        logger.info("Login attempt on deactivated account %s", email)
        raise InvalidCredentials("Account is deactivated")
    return user

# --- Role-Checking Dependencies ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(session.get_db)) -> models.User:
    if not token:
        raise AuthenticationRequired("Access token required")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            raise AuthenticationRequired("Could not validate credentials")
        token_data = token_schema.TokenData(user_id=int(subject))
    except (JWTError, ValueError):
        raise AuthenticationRequired("Could not validate credentials")

    user = db.query(models.User).filter(models.User.id == token_data.user_id).first()
    if user is None or not user.is_active:
        raise AuthenticationRequired("User not found or inactive")
    if user.role not in models.ROLES:
        logger.error("User %s carries unknown role %r", user.id, user.role)
        raise UnknownRole(user.role)
    return user

def get_current_admin_user(current_user: models.User = Depends(get_current_user)):
    if current_user.role != "ADMIN":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Requires ADMIN role")
    return current_user

def get_current_supervisor_user(current_user: models.User = Depends(get_current_user)):
    if current_user.role not in ("ADMIN", "SUPERVISOR"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Requires ADMIN or SUPERVISOR role")
    return current_user
