from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol


@dataclass
class SessionDto:
    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime


class SessionRepository(Protocol):
    def create(self, user_id: str, expires_at: datetime, ip_address: Optional[str] = None) -> SessionDto:
        ...

    def get(self, session_id: str) -> Optional[SessionDto]:
        ...

    def delete(self, session_id: str) -> None:
        ...
