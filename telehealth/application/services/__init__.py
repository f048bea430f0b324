# Services package (re-export feature modules for stable imports)
from .auth_service import AuthService, SessionContext
from .profile_service import ProfileService
from .appointments_service import AppointmentsService

__all__ = [
    "AuthService",
    "SessionContext",
    "ProfileService",
    "AppointmentsService",
]
