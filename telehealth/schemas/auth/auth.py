# telehealth/schemas/auth/auth.py
from pydantic import BaseModel, Field, field_validator
from typing import Literal
import re

from ..users.user import AccountResponse, EMAIL_PATTERN


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Unique login name")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., max_length=100)
    password: str = Field(..., min_length=1)
    role: Literal["patient", "doctor"] = "patient"

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if not re.match(r"^[A-Za-z0-9_.\-]+$", v):
            raise ValueError("Username can only contain letters, digits, dots, dashes and underscores")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    user: AccountResponse
