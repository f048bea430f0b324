"""Request-scoped wiring: services, the session guard and the role gate."""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .database import get_session
from .application.ports.audit_logger import AuditLogger
from .application.ports.appointments_repo import AppointmentsRepository
from .application.services.access import check_role
from .application.services.appointments_service import AppointmentsService
from .application.services.auth_service import AuthService, SessionContext
from .application.services.profile_service import ProfileService
from .exceptions import Forbidden
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.persistence.sqlalchemy.repositories.session_repository_sql import SqlSessionRepository

logger = logging.getLogger(__name__)

# Auth scheme; missing headers are reported by the guard, not by HTTPBearer
oauth2_scheme = HTTPBearer(auto_error=False)


def get_audit_logger() -> AuditLogger:
    return StdAuditLogger()


def get_auth_service(session: Session = Depends(get_session), audit: AuditLogger = Depends(get_audit_logger)) -> AuthService:
    return AuthService(
        user_repo=SqlUserRepository(session),
        session_repo=SqlSessionRepository(session),
        audit=audit,
    )


def get_profile_service(session: Session = Depends(get_session), audit: AuditLogger = Depends(get_audit_logger)) -> ProfileService:
    return ProfileService(user_repo=SqlUserRepository(session), audit=audit)


def get_appointments_repo(request: Request) -> AppointmentsRepository:
    return request.app.state.appointments_repo


def get_appointments_service(repo: AppointmentsRepository = Depends(get_appointments_repo)) -> AppointmentsService:
    return AppointmentsService(repo=repo)


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionContext:
    """Session guard: resolve the bearer token or fail with 401."""
    token = credentials.credentials if credentials else None
    return auth_service.authenticate(token)


def require_roles(*roles: str):
    """Role gate for an endpoint, e.g. ``Depends(require_roles("patient"))``."""
    allowed = frozenset(roles)

    def role_dependency(
        ctx: SessionContext = Depends(get_session_context),
        audit: AuditLogger = Depends(get_audit_logger),
    ) -> SessionContext:
        try:
            check_role(ctx.role, allowed)
        except Forbidden:
            audit.log("role_denied", ctx.username, user_id=ctx.user_id, success=False,
                      details={"role": ctx.role, "required": sorted(allowed)})
            raise
        return ctx

    return role_dependency
