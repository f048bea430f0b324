# telehealth/schemas/users/user.py
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from typing import Optional, List
from datetime import datetime
import re

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmergencyContact(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(..., max_length=100)
    phone: StrictStr = Field(..., max_length=20)


class MedicalHistory(BaseModel):
    allergies: List[str] = []
    medications: List[str] = []
    surgeries: List[str] = []
    conditions: List[str] = []
    familyHistory: List[str] = []


class PrivacySettings(BaseModel):
    shareData: bool = True
    emailNotifications: bool = True
    smsNotifications: bool = True


class AccountResponse(BaseModel):
    id: str
    username: str
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    dob: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[EmergencyContact] = None
    medicalHistory: MedicalHistory
    privacySettings: PrivacySettings
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


# Value checks for partial updates. Key membership is checked against the
# allow-lists before these models ever see the body.

class ProfileUpdate(BaseModel):
    name: Optional[StrictStr] = Field(None, min_length=1, max_length=100)
    email: Optional[StrictStr] = Field(None, max_length=100)
    phone: Optional[StrictStr] = Field(None, max_length=20)
    dob: Optional[StrictStr] = None
    address: Optional[StrictStr] = Field(None, max_length=255)
    emergencyContact: Optional[EmergencyContact] = None

    @field_validator("name", "email")
    @classmethod
    def validate_required(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, v):
        if v is None or v == "":
            return None
        try:
            dob = datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError("Invalid date format. Use YYYY-MM-DD")
        if dob > datetime.now():
            raise ValueError("Date of birth cannot be in the future")
        return v


class MedicalHistoryUpdate(BaseModel):
    allergies: Optional[List[StrictStr]] = None
    medications: Optional[List[StrictStr]] = None
    surgeries: Optional[List[StrictStr]] = None
    conditions: Optional[List[StrictStr]] = None
    familyHistory: Optional[List[StrictStr]] = None

    @field_validator("allergies", "medications", "surgeries", "conditions", "familyHistory")
    @classmethod
    def validate_list(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PrivacySettingsUpdate(BaseModel):
    shareData: Optional[StrictBool] = None
    emailNotifications: Optional[StrictBool] = None
    smsNotifications: Optional[StrictBool] = None

    @field_validator("shareData", "emailNotifications", "smsNotifications")
    @classmethod
    def validate_flag(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)
