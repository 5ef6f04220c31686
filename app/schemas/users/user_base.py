from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    email: EmailStr
    display_name: str = Field(..., min_length=1)


class UserCreate(UserBase):
    looking_for_text: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    display_name: Optional[str] = None


class UserOut(UserBase):
    id: UUID
    looking_for_text: Optional[str] = None
    is_active: bool
    is_email_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LookingForUpdate(BaseModel):
    looking_for_text: str


class UserStatusOut(BaseModel):
    user_id: UUID
    eligible: bool
    has_looking_for: bool
    answer_count: int
    profile_ready: bool
