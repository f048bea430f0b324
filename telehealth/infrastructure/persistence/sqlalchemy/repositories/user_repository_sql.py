from typing import Any, Optional
import json

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import User
from .....db.models.users.user import DEFAULT_MEDICAL_HISTORY, DEFAULT_PRIVACY_SETTINGS
from .....application.ports.user_repo import UserRepository, AccountDto
from .....exceptions import Conflict
from .....utils import as_utc, utcnow


def _load_json(raw: Optional[str], fallback: str) -> Any:
    try:
        return json.loads(raw) if raw else json.loads(fallback)
    except json.JSONDecodeError:
        return json.loads(fallback)


class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> AccountDto:
        medical_history = json.loads(DEFAULT_MEDICAL_HISTORY)
        medical_history.update(_load_json(user.medical_history, DEFAULT_MEDICAL_HISTORY))
        privacy_settings = json.loads(DEFAULT_PRIVACY_SETTINGS)
        privacy_settings.update(_load_json(user.privacy_settings, DEFAULT_PRIVACY_SETTINGS))
        return AccountDto(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            role=user.role,
            password_hash=user.password_hash,
            phone=user.phone,
            dob=user.dob,
            address=user.address,
            emergency_contact=_load_json(user.emergency_contact, "null"),
            medical_history=medical_history,
            privacy_settings=privacy_settings,
            created_at=as_utc(user.created_at),
            updated_at=as_utc(user.updated_at),
        )

    def _get(self, user_id: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.id == user_id)).first()

    def get_by_id(self, user_id: str) -> Optional[AccountDto]:
        user = self._get(user_id)
        return self._to_dto(user) if user else None

    def get_by_username(self, username: str) -> Optional[AccountDto]:
        user = self.session.exec(select(User).where(User.username == username)).first()
        return self._to_dto(user) if user else None

    def create(self, username: str, name: str, email: str, role: str, password_hash: str) -> AccountDto:
        user = User(username=username, name=name, email=email, role=role, password_hash=password_hash)
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same username
            self.session.rollback()
            raise Conflict("Username already exists") from e
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return self._to_dto(user)

    def save(self, account: AccountDto) -> AccountDto:
        """Write every mutable column of `account` in one commit (last write wins)."""
        user = self._get(account.id)
        if not user:
            raise LookupError(f"User {account.id} no longer exists")
        user.name = account.name
        user.email = account.email
        user.phone = account.phone
        user.dob = account.dob
        user.address = account.address
        user.emergency_contact = json.dumps(account.emergency_contact) if account.emergency_contact is not None else None
        user.medical_history = json.dumps(account.medical_history)
        user.privacy_settings = json.dumps(account.privacy_settings)
        user.password_hash = account.password_hash
        user.updated_at = utcnow()
        try:
            self.session.add(user)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return self._to_dto(user)

    def delete(self, user_id: str) -> bool:
        user = self._get(user_id)
        if not user:
            return False
        try:
            # Sessions go with the user through the relationship cascade
            self.session.delete(user)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True
