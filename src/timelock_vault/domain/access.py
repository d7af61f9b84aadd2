"""Role checks shared by the funding and withdrawal guards."""

from __future__ import annotations

from timelock_vault.domain.exceptions import UnauthorizedError

OWNER = "owner"
RECIPIENT = "recipient"


def require_role(caller: str, required: str, role: str) -> None:
    """Raise UnauthorizedError unless ``caller`` is the identity holding ``role``."""
    if caller != required:
        raise UnauthorizedError(caller=caller, role=role)
