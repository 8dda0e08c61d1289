# timesheet-backend/app/schemas/token.py
from pydantic import BaseModel

from app.schemas.user import User


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class TokenData(BaseModel):
    user_id: int


class LoginRequest(BaseModel):
    email: str
    password: str
