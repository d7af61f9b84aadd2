"""Domain enumerations for the Timelock Vault.

These enums define the canonical states and types used throughout the system.
They are framework-agnostic (no FastAPI, no ledger imports).
"""

import enum


class VaultStatus(enum.StrEnum):
    """Lifecycle states of a vault.

    State transitions are enforced by the VaultStateMachine guard.
    See domain/state_machine.py for the transition table.
    """

    UNFUNDED = "UNFUNDED"
    FUNDED = "FUNDED"
    RELEASED = "RELEASED"


class AssetKind(enum.StrEnum):
    """Which transfer path a funded vault uses."""

    NATIVE = "native"
    TOKEN = "token"


class EventType(enum.StrEnum):
    """Types of events emitted by a vault.

    Every successful state transition produces exactly one event.
    """

    VAULT_CREATED = "VAULT_CREATED"
    VAULT_FUNDED = "VAULT_FUNDED"
    VAULT_WITHDRAWN = "VAULT_WITHDRAWN"
