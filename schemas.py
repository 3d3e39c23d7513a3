from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime, timezone


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("*")
    @classmethod
    def datetimes_as_utc(cls, value):
        """Naive datetimes are UTC; always emit them with an offset"""
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SignupRequest(CamelModel):
    """Schema for registering a user; presence is checked by the service"""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    """Schema for logging in"""
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(CamelModel):
    """Public user fields returned alongside a token"""
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class UserProfile(UserSummary):
    """User record without the password hash"""
    created_at: datetime


class AuthResponse(CamelModel):
    """Schema for signup and login responses"""
    token: str
    user: UserSummary


class TaskCreate(CamelModel):
    """Schema for creating a new task"""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[int] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None


class TaskUpdate(CamelModel):
    """Schema for replacing a task; omitted fields are stored as null"""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[int] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None


class TaskResponse(CamelModel):
    """Schema for task response"""
    id: str
    user_id: str
    title: Optional[str]
    description: Optional[str]
    completed: Optional[bool]
    priority: Optional[int]
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
