from typing import Collection

from ...exceptions import Forbidden

ROLE_PATIENT = "patient"
ROLE_DOCTOR = "doctor"
ROLES = (ROLE_PATIENT, ROLE_DOCTOR)


def check_role(role: str, required_roles: Collection[str]) -> None:
    """Raise Forbidden unless `role` is one of `required_roles`."""
    if role not in required_roles:
        raise Forbidden(f"This action requires role: {', '.join(sorted(required_roles))}")
