from dataclasses import dataclass, field
from typing import Protocol, Optional, Dict, List, Any
from datetime import datetime


@dataclass
class AccountDto:
    id: str
    username: str
    name: str
    email: str
    role: str
    password_hash: str
    phone: Optional[str] = None
    dob: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[Dict[str, str]] = None
    medical_history: Dict[str, List[str]] = field(default_factory=dict)
    privacy_settings: Dict[str, bool] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public_view(self) -> Dict[str, Any]:
        """Account as returned to clients; the password hash never leaves the service."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
            "dob": self.dob,
            "address": self.address,
            "emergencyContact": dict(self.emergency_contact) if self.emergency_contact is not None else None,
            "medicalHistory": {k: list(v) for k, v in self.medical_history.items()},
            "privacySettings": dict(self.privacy_settings),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class UserRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[AccountDto]:
        ...

    def get_by_username(self, username: str) -> Optional[AccountDto]:
        ...

    def create(self, username: str, name: str, email: str, role: str, password_hash: str) -> AccountDto:
        ...

    def save(self, account: AccountDto) -> AccountDto:
        ...

    def delete(self, user_id: str) -> bool:
        ...
