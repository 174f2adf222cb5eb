import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from velvet_routes.config import settings
from velvet_routes.schemas.common import CamelModel


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("All fields are required")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < settings.min_password_length:
            raise ValueError(f"Password must be at least {settings.min_password_length} characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    search_history: list[dict] = []
    bookings: list[dict] = []
    created_at: datetime


class AuthResponse(BaseModel):
    success: bool = True
    user: UserResponse
    token: str


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserResponse


class SearchEntryRequest(BaseModel):
    destination: str
    details: dict | None = None

    @field_validator("destination")
    @classmethod
    def destination_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Destination is required")
        return v


class SearchHistoryResponse(CamelModel):
    success: bool = True
    search_history: list[dict]
