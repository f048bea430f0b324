# telehealth/db/models/users/user.py
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, Text
from datetime import datetime
import uuid

from ....utils import utcnow

DEFAULT_MEDICAL_HISTORY = '{"allergies": [], "medications": [], "surgeries": [], "conditions": [], "familyHistory": []}'
DEFAULT_PRIVACY_SETTINGS = '{"shareData": true, "emailNotifications": true, "smsNotifications": true}'

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    username: str = Field(max_length=50, unique=True, index=True)
    name: str = Field(max_length=100)
    email: str = Field(max_length=100)
    role: str = Field(max_length=10, default="patient")  # patient | doctor
    password_hash: str = Field(max_length=255)
    phone: Optional[str] = Field(max_length=20, default=None)
    dob: Optional[str] = Field(max_length=10, default=None)  # YYYY-MM-DD
    address: Optional[str] = Field(max_length=255, default=None)
    # Nested documents kept as JSON strings
    emergency_contact: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    medical_history: str = Field(default=DEFAULT_MEDICAL_HISTORY, sa_column=Column(Text, nullable=False))
    privacy_settings: str = Field(default=DEFAULT_PRIVACY_SETTINGS, sa_column=Column(Text, nullable=False))
    # Timestamps are timezone-aware UTC
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    sessions: List["UserSession"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
