"""Domain exceptions for the Timelock Vault.

Every exception here rejects a whole operation: nothing is moved and the
vault record is left untouched. The API layer's middleware translates them
to HTTP responses.
"""


class VaultError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "VAULT_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# --- Authorization ---


class UnauthorizedError(VaultError):
    """Raised when the caller does not hold the role an operation requires."""

    def __init__(self, caller: str, role: str) -> None:
        super().__init__(
            message=f"Only the {role} of the vault can call this method (caller: {caller})",
            code="UNAUTHORIZED",
        )
        self.caller = caller
        self.role = role


# --- Funding ---


class AlreadyFundedError(VaultError):
    """Raised when funding is attempted on a vault that is already funded."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Cannot fund vault twice: {address}",
            code="ALREADY_FUNDED",
        )
        self.address = address


class InvalidAmountError(VaultError):
    """Raised for a zero or negative deposit."""

    def __init__(self, amount: int) -> None:
        super().__init__(
            message=f"Deposit amount must be positive, got {amount}",
            code="INVALID_AMOUNT",
        )
        self.amount = amount


class InvalidLockDurationError(VaultError):
    """Raised when the lock duration is zero/negative or above the maximum."""

    def __init__(self, lock_duration: int, max_lock_duration: int) -> None:
        if lock_duration <= 0:
            message = f"Cannot lock for 0 or negative blocks, got {lock_duration}"
        else:
            message = (
                f"Cannot lock for more than max lock duration: "
                f"{lock_duration} > {max_lock_duration}"
            )
        super().__init__(message=message, code="INVALID_LOCK_DURATION")
        self.lock_duration = lock_duration
        self.max_lock_duration = max_lock_duration


class InsufficientBalanceError(VaultError):
    """Raised when the funding party holds less than the requested deposit."""

    def __init__(self, holder: str, required: int, available: int) -> None:
        super().__init__(
            message=(
                f"Insufficient balance for {holder}: "
                f"required {required}, available {available}"
            ),
            code="INSUFFICIENT_BALANCE",
        )
        self.holder = holder
        self.required = required
        self.available = available


# --- Withdrawal ---


class NotFundedError(VaultError):
    """Raised when withdrawal is attempted before any funding occurred."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Vault has not been funded: {address}",
            code="NOT_FUNDED",
        )
        self.address = address


class LockNotExpiredError(VaultError):
    """Raised when withdrawal is attempted before the unlock height."""

    def __init__(self, current_height: int, unlock_height: int) -> None:
        super().__init__(
            message=(
                f"Cannot withdraw before unlock height has passed: "
                f"current {current_height}, unlock {unlock_height}"
            ),
            code="LOCK_NOT_EXPIRED",
        )
        self.current_height = current_height
        self.unlock_height = unlock_height


# --- Transfers ---


class TransferFailedError(VaultError):
    """Raised when the asset-transfer provider rejects a movement."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="TRANSFER_FAILED")


class LedgerError(VaultError):
    """Raised by a ledger when it refuses a debit (balance or allowance too low)."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="LEDGER_ERROR")


class UnknownAssetError(VaultError):
    """Raised when a token ledger id is not registered in the environment."""

    def __init__(self, asset_id: str | None) -> None:
        super().__init__(
            message=f"Unknown token ledger: {asset_id}",
            code="UNKNOWN_ASSET",
        )
        self.asset_id = asset_id


# --- Lookup / State Machine ---


class VaultNotFoundError(VaultError):
    """Raised when a vault address does not exist."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Vault not found: {address}",
            code="VAULT_NOT_FOUND",
        )
        self.address = address


class InvalidStateTransitionError(VaultError):
    """Raised when an attempted state transition is not allowed.

    Example: UNFUNDED -> RELEASED (must go through FUNDED).
    """

    def __init__(self, current_state: str, attempted_event: str) -> None:
        super().__init__(
            message=f"Invalid state transition: {current_state} -> {attempted_event}",
            code="INVALID_STATE_TRANSITION",
        )
        self.current_state = current_state
        self.attempted_event = attempted_event
