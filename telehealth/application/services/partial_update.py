"""Allow-list checks for partial updates of account sub-resources.

Every key in an update body must belong to the allow-list of the resource kind
being updated. A single unknown key rejects the whole request; nothing from the
valid subset is applied. Values are type-checked only after the key check.
"""
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Type
import logging

from pydantic import BaseModel, ValidationError

from ...exceptions import InvalidUpdate
from ...schemas.users.user import ProfileUpdate, MedicalHistoryUpdate, PrivacySettingsUpdate

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    PROFILE = "profile"
    MEDICAL_HISTORY = "medicalHistory"
    PRIVACY_SETTINGS = "privacySettings"


ALLOWED_UPDATES: Dict[ResourceKind, FrozenSet[str]] = {
    ResourceKind.PROFILE: frozenset({"name", "email", "phone", "dob", "address", "emergencyContact"}),
    ResourceKind.MEDICAL_HISTORY: frozenset({"allergies", "medications", "surgeries", "conditions", "familyHistory"}),
    ResourceKind.PRIVACY_SETTINGS: frozenset({"shareData", "emailNotifications", "smsNotifications"}),
}

_VALUE_MODELS: Dict[ResourceKind, Type[BaseModel]] = {
    ResourceKind.PROFILE: ProfileUpdate,
    ResourceKind.MEDICAL_HISTORY: MedicalHistoryUpdate,
    ResourceKind.PRIVACY_SETTINGS: PrivacySettingsUpdate,
}


def disallowed_fields(kind: ResourceKind, body: Mapping[str, Any]) -> FrozenSet[str]:
    """Keys of `body` that are not in the allow-list for `kind`."""
    return frozenset(body) - ALLOWED_UPDATES[kind]


def validate_partial_update(kind: ResourceKind, body: Any) -> Dict[str, Any]:
    """Check an update body and return the submitted fields with normalized values.

    Raises InvalidUpdate if the body is not an object, names a field outside
    the allow-list, or carries a value of the wrong type.
    """
    if not isinstance(body, Mapping):
        raise InvalidUpdate("Update body must be a JSON object")

    rejected = disallowed_fields(kind, body)
    if rejected:
        logger.info(f"Rejected {kind.value} update with disallowed fields: {sorted(rejected)}")
        raise InvalidUpdate(f"Invalid updates: {', '.join(sorted(rejected))}")

    if not body:
        return {}

    try:
        parsed = _VALUE_MODELS[kind].model_validate(dict(body))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidUpdate(f"Invalid value for {field}: {first.get('msg')}")

    # Only what the client actually sent; unsubmitted fields stay untouched
    return parsed.model_dump(include=set(body))
