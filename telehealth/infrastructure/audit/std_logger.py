import hashlib
import json
import logging
from typing import Any, Dict, Optional

from ...application.ports.audit_logger import AuditLogger
from ...utils import utcnow


def _hash_username(username: str) -> str:
    return hashlib.sha256(username.encode("utf-8")).hexdigest()


class StdAuditLogger(AuditLogger):
    """Writes one `AUDIT: {json}` line per security event; usernames are hashed."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("telehealth.audit")

    def log(self, action: str, username: str, user_id: Optional[str] = None, request_id: Optional[str] = None, ip_address: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        record = dict(
            timestamp=utcnow().isoformat(),
            action=action,
            success=success,
            username_hash=_hash_username(username),
            user_id=user_id,
            request_id=request_id,
            ip_address=ip_address,
            details=details or {},
        )
        level = logging.INFO if success else logging.WARNING
        self._logger.log(level, f"AUDIT: {json.dumps(record, default=str)}")
