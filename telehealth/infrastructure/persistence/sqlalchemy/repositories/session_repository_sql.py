from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from .....db.models import UserSession
from .....application.ports.session_repo import SessionRepository, SessionDto
from .....utils import as_utc


class SqlSessionRepository(SessionRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, rec: UserSession) -> SessionDto:
        return SessionDto(
            id=rec.id,
            user_id=rec.user_id,
            expires_at=as_utc(rec.expires_at),
            created_at=as_utc(rec.created_at),
        )

    def create(self, user_id: str, expires_at: datetime, ip_address: Optional[str] = None) -> SessionDto:
        rec = UserSession(user_id=user_id, expires_at=expires_at, ip_address=ip_address)
        self.session.add(rec)
        self.session.commit()
        self.session.refresh(rec)
        return self._to_dto(rec)

    def get(self, session_id: str) -> Optional[SessionDto]:
        rec = self.session.exec(select(UserSession).where(UserSession.id == session_id)).first()
        return self._to_dto(rec) if rec else None

    def delete(self, session_id: str) -> None:
        rec = self.session.exec(select(UserSession).where(UserSession.id == session_id)).first()
        if not rec:
            return
        self.session.delete(rec)
        self.session.commit()
