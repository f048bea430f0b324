from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging

from ..ports.user_repo import UserRepository, AccountDto
from ..ports.session_repo import SessionRepository
from ..ports.audit_logger import AuditLogger
from .access import ROLES
from ...core.config import settings
from ...exceptions import Conflict, InvalidCredentials, InvalidRequest, ReadFailed, Unauthenticated, UpdateFailed
from ...security import access_token_expiry, create_access_token, decode_jwt_token, get_password_hash, verify_password
from ...utils import as_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Who is calling: resolved once per request and passed to handlers explicitly."""
    session_id: str
    token: str
    user_id: str
    username: str
    role: str
    account: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthService:
    user_repo: UserRepository
    session_repo: SessionRepository
    audit: Optional[AuditLogger] = None

    def register(self, username: str, name: str, email: str, password: str, role: str = "patient", ip_address: Optional[str] = None) -> Tuple[str, AccountDto]:
        if role not in ROLES:
            raise InvalidRequest(f"Invalid role. Must be one of: {list(ROLES)}")
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise InvalidRequest(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        # Nothing is written unless a token can be issued afterwards
        if not settings.secret_key_configured:
            logger.error("Registration refused: JWT_SECRET_KEY is not configured")
            raise UpdateFailed("Token signing is not configured")

        if self.user_repo.get_by_username(username):
            raise self._username_taken(username, ip_address)

        try:
            account = self.user_repo.create(username, name, email, role, get_password_hash(password))
        except Conflict as e:
            raise self._username_taken(username, ip_address) from e
        except Exception as e:
            logger.error(f"Error creating account for {username}: {e}")
            raise UpdateFailed("Error creating account") from e

        try:
            token = self._issue_token(account, ip_address)
        except UpdateFailed:
            # Free the username again; the session row goes with the account
            self.user_repo.delete(account.id)
            raise
        if self.audit is not None:
            self.audit.log("register", username, user_id=account.id, ip_address=ip_address, details={"role": role})
        return token, account

    def login(self, username: str, password: str, ip_address: Optional[str] = None) -> Tuple[str, AccountDto]:
        account = self.user_repo.get_by_username(username)
        if not account or not verify_password(password, account.password_hash):
            if self.audit is not None:
                self.audit.log("login", username, ip_address=ip_address, success=False)
            raise InvalidCredentials("Invalid username or password")

        token = self._issue_token(account, ip_address)
        if self.audit is not None:
            self.audit.log("login", username, user_id=account.id, ip_address=ip_address)
        return token, account

    def authenticate(self, token: Optional[str]) -> SessionContext:
        """Resolve a bearer token to a live session, or raise Unauthenticated.

        Every failure raises the same error so callers cannot tell a forged
        token from an expired, revoked or orphaned one.
        """
        if not token:
            raise Unauthenticated()
        payload = decode_jwt_token(token)
        if not payload:
            raise Unauthenticated()
        user_id = payload.get("sub")
        session_id = payload.get("sid")
        if not user_id or not session_id:
            raise Unauthenticated()

        try:
            session = self.session_repo.get(session_id)
            account = self.user_repo.get_by_id(user_id) if session else None
        except Exception as e:
            logger.error(f"Error resolving session {session_id}: {e}")
            raise ReadFailed("Error resolving session") from e

        if not session or session.user_id != user_id or as_utc(session.expires_at) <= utcnow():
            raise Unauthenticated()
        if not account:
            raise Unauthenticated()

        return SessionContext(
            session_id=session_id,
            token=token,
            user_id=account.id,
            username=account.username,
            role=account.role,
            account=account.public_view(),
        )

    def logout(self, ctx: SessionContext) -> None:
        try:
            self.session_repo.delete(ctx.session_id)
        except Exception as e:
            logger.error(f"Error revoking session {ctx.session_id}: {e}")
            raise UpdateFailed("Error logging out") from e
        if self.audit is not None:
            self.audit.log("logout", ctx.username, user_id=ctx.user_id)

    def _issue_token(self, account: AccountDto, ip_address: Optional[str]) -> str:
        try:
            session = self.session_repo.create(account.id, access_token_expiry(), ip_address)
        except Exception as e:
            logger.error(f"Error creating session for {account.id}: {e}")
            raise UpdateFailed("Error creating session") from e
        try:
            return create_access_token(account.id, session.id, session.expires_at)
        except ValueError as e:
            logger.error(f"Error signing token for {account.id}: {e}")
            self.session_repo.delete(session.id)
            raise UpdateFailed("Error issuing token") from e

    def _username_taken(self, username: str, ip_address: Optional[str]) -> Conflict:
        if self.audit is not None:
            self.audit.log("register", username, ip_address=ip_address, success=False, details={"error": "USERNAME_TAKEN"})
        return Conflict("Username already exists")
