import os

# Settings are read at import time, so the environment is fixed before telehealth loads
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from telehealth.database import engine
from telehealth.db import models  # noqa: F401
from telehealth.infrastructure.booking.memory_appointments_repo import InMemoryAppointmentsRepository
from telehealth.main import app


@pytest.fixture
def client():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    app.state.appointments_repo = InMemoryAppointmentsRepository()
    with TestClient(app) as c:
        yield c


def register(client, username="alice", password="secret123", role="patient", name="Alice Smith", email=None):
    resp = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "name": name,
            "email": email or f"{username}@example.com",
            "password": password,
            "role": role,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
