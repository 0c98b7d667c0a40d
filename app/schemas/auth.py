from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.user import Role


# Request schemas
class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


# Response schemas
class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    username: str
    email: str
    role: Role
    expires_in: int  # seconds
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LogoutResponse(BaseModel):
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserProfileResponse(BaseModel):
    username: str
    email: str
    first_name: str
    last_name: str
    role: Role
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
