import pytest

from telehealth.application.services.partial_update import (
    ALLOWED_UPDATES,
    ResourceKind,
    disallowed_fields,
    validate_partial_update,
)
from telehealth.exceptions import InvalidUpdate


def test_disallowed_fields_are_reported():
    body = {"name": "Bob", "role": "doctor", "password": "x"}
    assert disallowed_fields(ResourceKind.PROFILE, body) == frozenset({"role", "password"})


def test_allow_lists_do_not_leak_between_kinds():
    assert "shareData" not in ALLOWED_UPDATES[ResourceKind.PROFILE]
    assert "allergies" not in ALLOWED_UPDATES[ResourceKind.PRIVACY_SETTINGS]
    assert "name" not in ALLOWED_UPDATES[ResourceKind.MEDICAL_HISTORY]


def test_one_bad_key_rejects_whole_body():
    with pytest.raises(InvalidUpdate) as exc:
        validate_partial_update(ResourceKind.PROFILE, {"name": "Bob", "role": "doctor"})
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid updates: role"


def test_key_check_runs_before_value_check():
    # "name" carries a bad value but the unknown key is what gets reported
    with pytest.raises(InvalidUpdate) as exc:
        validate_partial_update(ResourceKind.PROFILE, {"name": 123, "id": "other"})
    assert "id" in exc.value.detail


def test_non_object_body_rejected():
    for body in (["name"], "name", 5, None):
        with pytest.raises(InvalidUpdate):
            validate_partial_update(ResourceKind.PROFILE, body)


def test_empty_body_is_noop():
    assert validate_partial_update(ResourceKind.PRIVACY_SETTINGS, {}) == {}


def test_only_submitted_fields_returned():
    out = validate_partial_update(ResourceKind.PRIVACY_SETTINGS, {"shareData": False})
    assert out == {"shareData": False}


def test_privacy_flags_must_be_booleans():
    with pytest.raises(InvalidUpdate) as exc:
        validate_partial_update(ResourceKind.PRIVACY_SETTINGS, {"shareData": "false"})
    assert "shareData" in exc.value.detail


def test_profile_name_cannot_be_null():
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"name": None})


def test_profile_email_format():
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"email": "not-an-email"})
    out = validate_partial_update(ResourceKind.PROFILE, {"email": "bob@example.com"})
    assert out == {"email": "bob@example.com"}


def test_profile_dob_rules():
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"dob": "01/02/1990"})
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"dob": "2999-01-01"})
    assert validate_partial_update(ResourceKind.PROFILE, {"dob": ""}) == {"dob": None}
    assert validate_partial_update(ResourceKind.PROFILE, {"dob": "1990-05-17"}) == {"dob": "1990-05-17"}


def test_emergency_contact_shape():
    out = validate_partial_update(
        ResourceKind.PROFILE, {"emergencyContact": {"name": "Carol", "phone": "555-0100"}}
    )
    assert out == {"emergencyContact": {"name": "Carol", "phone": "555-0100"}}
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"emergencyContact": {"name": "Carol", "relation": "aunt"}})
    assert validate_partial_update(ResourceKind.PROFILE, {"emergencyContact": None}) == {"emergencyContact": None}


def test_medical_history_lists_of_strings():
    out = validate_partial_update(ResourceKind.MEDICAL_HISTORY, {"allergies": ["peanuts"]})
    assert out == {"allergies": ["peanuts"]}
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.MEDICAL_HISTORY, {"allergies": "peanuts"})
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.MEDICAL_HISTORY, {"medications": [1, 2]})
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.MEDICAL_HISTORY, {"surgeries": None})


def test_profile_name_cannot_be_blank():
    with pytest.raises(InvalidUpdate):
        validate_partial_update(ResourceKind.PROFILE, {"name": "   "})
    assert validate_partial_update(ResourceKind.PROFILE, {"name": "  Bob  "}) == {"name": "Bob"}
