"""Domain layer — pure business logic with zero framework dependencies."""

from timelock_vault.domain.access import require_role
from timelock_vault.domain.enums import (
    AssetKind,
    EventType,
    VaultStatus,
)
from timelock_vault.domain.exceptions import (
    AlreadyFundedError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidLockDurationError,
    InvalidStateTransitionError,
    LedgerError,
    LockNotExpiredError,
    NotFundedError,
    TransferFailedError,
    UnauthorizedError,
    UnknownAssetError,
    VaultError,
    VaultNotFoundError,
)
from timelock_vault.domain.state_machine import (
    VaultStateMachine,
    validate_transition,
)
from timelock_vault.domain.transfer_protocol import (
    AssetTransfer,
    HeightSource,
    TransferProviders,
)
from timelock_vault.domain.vault import (
    DEFAULT_MAX_LOCK_DURATION,
    EscrowRecord,
    Vault,
    VaultEvent,
)

__all__ = [
    "AssetKind",
    "EventType",
    "VaultStatus",
    "AlreadyFundedError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "InvalidLockDurationError",
    "InvalidStateTransitionError",
    "LedgerError",
    "LockNotExpiredError",
    "NotFundedError",
    "TransferFailedError",
    "UnauthorizedError",
    "UnknownAssetError",
    "VaultError",
    "VaultNotFoundError",
    "VaultStateMachine",
    "validate_transition",
    "AssetTransfer",
    "HeightSource",
    "TransferProviders",
    "DEFAULT_MAX_LOCK_DURATION",
    "EscrowRecord",
    "Vault",
    "VaultEvent",
    "require_role",
]
