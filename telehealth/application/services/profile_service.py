from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
import logging

from ..ports.user_repo import UserRepository, AccountDto
from ..ports.audit_logger import AuditLogger
from .partial_update import ResourceKind, validate_partial_update
from ...core.config import settings
from ...exceptions import InvalidCredentials, InvalidUpdate, NotFound, ReadFailed, UpdateFailed
from ...security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


def apply_profile_update(account: AccountDto, changes: Dict[str, Any]) -> AccountDto:
    """Copy of `account` with the submitted profile fields assigned."""
    updated = replace(account)
    if "name" in changes:
        updated.name = changes["name"]
    if "email" in changes:
        updated.email = changes["email"]
    if "phone" in changes:
        updated.phone = changes["phone"]
    if "dob" in changes:
        updated.dob = changes["dob"]
    if "address" in changes:
        updated.address = changes["address"]
    if "emergencyContact" in changes:
        contact = changes["emergencyContact"]
        updated.emergency_contact = dict(contact) if contact is not None else None
    return updated


def apply_medical_history_update(account: AccountDto, changes: Dict[str, Any]) -> AccountDto:
    history = {key: list(values) for key, values in account.medical_history.items()}
    for key, values in changes.items():
        history[key] = list(values)
    return replace(account, medical_history=history)


def apply_privacy_update(account: AccountDto, changes: Dict[str, Any]) -> AccountDto:
    privacy = dict(account.privacy_settings)
    for key, flag in changes.items():
        privacy[key] = bool(flag)
    return replace(account, privacy_settings=privacy)


@dataclass
class ProfileService:
    user_repo: UserRepository
    audit: Optional[AuditLogger] = None

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        return self._load(user_id).public_view()

    def update_profile(self, user_id: str, body: Any) -> Dict[str, Any]:
        changes = validate_partial_update(ResourceKind.PROFILE, body)
        account = self._load(user_id)
        saved = self._persist(apply_profile_update(account, changes), "Error updating profile")
        return saved.public_view()

    def update_medical_history(self, user_id: str, body: Any) -> Dict[str, Any]:
        changes = validate_partial_update(ResourceKind.MEDICAL_HISTORY, body)
        account = self._load(user_id)
        saved = self._persist(apply_medical_history_update(account, changes), "Error updating medical history")
        return saved.public_view()["medicalHistory"]

    def update_privacy_settings(self, user_id: str, body: Any) -> Dict[str, Any]:
        changes = validate_partial_update(ResourceKind.PRIVACY_SETTINGS, body)
        account = self._load(user_id)
        saved = self._persist(apply_privacy_update(account, changes), "Error updating privacy settings")
        return saved.public_view()["privacySettings"]

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        account = self._load(user_id)
        if not verify_password(current_password, account.password_hash):
            self._audit("password_change", account, success=False, details={"reason": "current_password_mismatch"})
            raise InvalidCredentials("Current password is incorrect")
        if len(new_password) < settings.MIN_PASSWORD_LENGTH:
            raise InvalidUpdate(f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters")

        self._persist(replace(account, password_hash=get_password_hash(new_password)), "Error changing password")
        self._audit("password_change", account)

    def delete_account(self, user_id: str) -> None:
        account = self._load(user_id)
        try:
            deleted = self.user_repo.delete(user_id)
        except Exception as e:
            logger.error(f"Error deleting account {user_id}: {e}")
            raise UpdateFailed("Error deleting account") from e
        if not deleted:
            raise NotFound("User not found")
        self._audit("account_deleted", account)

    def _load(self, user_id: str) -> AccountDto:
        try:
            account = self.user_repo.get_by_id(user_id)
        except Exception as e:
            logger.error(f"Error fetching account {user_id}: {e}")
            raise ReadFailed("Error fetching profile") from e
        if not account:
            raise NotFound("User not found")
        return account

    def _persist(self, account: AccountDto, failure_message: str) -> AccountDto:
        try:
            return self.user_repo.save(account)
        except Exception as e:
            logger.error(f"{failure_message} for {account.id}: {e}")
            raise UpdateFailed(failure_message) from e

    def _audit(self, action: str, account: AccountDto, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        if self.audit is not None:
            self.audit.log(action, account.username, user_id=account.id, success=success, details=details)
