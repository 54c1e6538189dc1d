from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class ProfileBase(BaseModel):
    """Base profile model."""
    email: EmailStr
    full_name: Optional[str] = None
    role: str = "student"  # student, admin


class ProfileSync(BaseModel):
    """Profile fields sent by the client after sign-in."""
    email: EmailStr
    full_name: Optional[str] = None


class Profile(ProfileBase):
    """Profile stored under the derived internal id."""
    id: str = Field(alias="_id")
    auth_provider: str = "firebase"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        from_attributes = True


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminToken(BaseModel):
    """Admin session capability."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
