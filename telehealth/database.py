from typing import Any, Dict

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .core.config import settings

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _engine_options(url: str) -> Dict[str, Any]:
    if not url.startswith("sqlite"):
        # Managed Postgres drops idle connections
        return {"pool_pre_ping": True, "pool_recycle": 300, "pool_size": 5, "max_overflow": 10}
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in IN_MEMORY_SQLITE_URLS:
        # Every new connection would otherwise get its own empty database
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG, **_engine_options(settings.DATABASE_URL))


def create_db_and_tables():
    from .db import models  # noqa: F401  (registers tables on the metadata)
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
