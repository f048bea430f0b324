import hashlib
import json
import logging

from telehealth.infrastructure.audit.std_logger import StdAuditLogger


def test_audit_line_hashes_username(caplog):
    audit = StdAuditLogger()
    with caplog.at_level(logging.INFO, logger="telehealth.audit"):
        audit.log("login", "alice", user_id="user-1", ip_address="10.0.0.1")

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert record.getMessage().startswith("AUDIT: ")
    entry = json.loads(record.getMessage()[len("AUDIT: "):])
    assert entry["action"] == "login"
    assert entry["username_hash"] == hashlib.sha256(b"alice").hexdigest()
    assert "alice" not in record.getMessage()


def test_failed_action_logged_as_warning(caplog):
    audit = StdAuditLogger()
    with caplog.at_level(logging.INFO, logger="telehealth.audit"):
        audit.log("password_change", "alice", success=False, details={"reason": "current_password_mismatch"})
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert json.loads(record.getMessage()[len("AUDIT: "):])["details"] == {"reason": "current_password_mismatch"}
