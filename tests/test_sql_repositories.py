from dataclasses import replace
from datetime import timedelta

import pytest
from sqlmodel import Session, SQLModel

from telehealth.application.services.auth_service import AuthService
from telehealth.database import engine
from telehealth.exceptions import Conflict, Unauthenticated
from telehealth.infrastructure.persistence.sqlalchemy.repositories.session_repository_sql import SqlSessionRepository
from telehealth.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from telehealth.security import access_token_expiry, create_access_token, get_password_hash
from telehealth.utils import utcnow


@pytest.fixture
def db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


def test_register_and_authenticate_through_sql(db):
    svc = AuthService(user_repo=SqlUserRepository(db), session_repo=SqlSessionRepository(db))
    token, account = svc.register("alice", "Alice", "alice@example.com", "secret123")

    assert account.created_at.tzinfo is not None
    assert account.privacy_settings == {
        "shareData": True,
        "emailNotifications": True,
        "smsNotifications": True,
    }
    ctx = svc.authenticate(token)
    assert ctx.user_id == account.id

    session = svc.session_repo.get(ctx.session_id)
    assert session.expires_at.tzinfo is not None
    assert session.expires_at > utcnow()


def test_create_duplicate_username_is_conflict(db):
    repo = SqlUserRepository(db)
    repo.create("alice", "Alice", "alice@example.com", "patient", get_password_hash("secret123"))
    with pytest.raises(Conflict):
        repo.create("alice", "Other", "other@example.com", "patient", get_password_hash("secret123"))
    # The session is usable again after the rollback
    assert repo.get_by_username("alice").name == "Alice"


def test_save_writes_fields_and_bumps_updated_at(db):
    repo = SqlUserRepository(db)
    account = repo.create("alice", "Alice", "alice@example.com", "patient", get_password_hash("secret123"))

    changed = replace(
        account,
        name="Alice Jones",
        emergency_contact={"name": "Carol", "phone": "555-0100"},
        privacy_settings={**account.privacy_settings, "shareData": False},
    )
    saved = repo.save(changed)

    assert saved.name == "Alice Jones"
    assert saved.emergency_contact == {"name": "Carol", "phone": "555-0100"}
    assert saved.privacy_settings["shareData"] is False
    assert saved.updated_at >= account.updated_at
    assert repo.get_by_id(account.id).email == "alice@example.com"


def test_delete_removes_sessions(db):
    users = SqlUserRepository(db)
    sessions = SqlSessionRepository(db)
    account = users.create("alice", "Alice", "alice@example.com", "patient", get_password_hash("secret123"))
    sid = sessions.create(account.id, access_token_expiry()).id

    assert users.delete(account.id) is True
    assert sessions.get(sid) is None
    assert users.delete(account.id) is False


def test_expired_session_row_not_accepted(db):
    users = SqlUserRepository(db)
    sessions = SqlSessionRepository(db)
    svc = AuthService(user_repo=users, session_repo=sessions)
    token, account = svc.register("alice", "Alice", "alice@example.com", "secret123")
    sid = svc.authenticate(token).session_id

    sessions.delete(sid)
    with pytest.raises(Unauthenticated):
        svc.authenticate(token)

    stale = sessions.create(account.id, utcnow() - timedelta(minutes=1))
    stale_token = create_access_token(account.id, stale.id, utcnow() + timedelta(minutes=5))
    with pytest.raises(Unauthenticated):
        svc.authenticate(stale_token)
