"""Timelock Vault — single-use, two-party time-locked escrow.

The owner funds the vault exactly once, with either a token balance or native
value, and picks a lock duration. The recipient may withdraw the whole deposit
once the environment's height reaches the unlock height.

Every operation checks all of its preconditions before touching anything, then
moves the asset, then updates the record. A rejected operation raises a
VaultError and leaves the record exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from statemachine.exceptions import TransitionNotAllowed

from timelock_vault.domain.access import OWNER, RECIPIENT, require_role
from timelock_vault.domain.enums import AssetKind, EventType, VaultStatus
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
    UnknownAssetError,
)
from timelock_vault.domain.state_machine import validate_transition

if TYPE_CHECKING:
    from timelock_vault.domain.transfer_protocol import (
        AssetTransfer,
        HeightSource,
        TransferProviders,
    )

DEFAULT_MAX_LOCK_DURATION = 5000


@dataclass
class EscrowRecord:
    """The vault's persisted state. Owned exclusively by one Vault."""

    owner: str
    recipient: str
    max_lock_duration: int
    asset_kind: AssetKind | None = None
    asset_id: str | None = None
    amount: int = 0
    unlock_height: int = 0
    status: VaultStatus = VaultStatus.UNFUNDED

    @property
    def funded(self) -> bool:
        return self.status != VaultStatus.UNFUNDED

    def to_dict(self) -> dict:
        return {
            "owner": self.owner,
            "recipient": self.recipient,
            "max_lock_duration": self.max_lock_duration,
            "asset_kind": self.asset_kind.value if self.asset_kind else None,
            "asset_id": self.asset_id,
            "amount": self.amount,
            "unlock_height": self.unlock_height,
            "status": self.status.value,
            "funded": self.funded,
        }


@dataclass(frozen=True)
class VaultEvent:
    """Outcome of a successful vault operation.

    Attributes:
        event_type: Which transition happened.
        vault: Address of the vault that emitted the event.
        height: Environment height at which the operation ran.
        data: Operation-specific details (amounts, parties, asset).
    """

    event_type: EventType
    vault: str
    height: int
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "vault": self.vault,
            "height": self.height,
            "data": self.data,
        }


class Vault:
    """Time-locked escrow state machine over one EscrowRecord."""

    def __init__(
        self,
        address: str,
        owner: str,
        recipient: str,
        *,
        providers: TransferProviders,
        heights: HeightSource,
        max_lock_duration: int = DEFAULT_MAX_LOCK_DURATION,
    ) -> None:
        if isinstance(max_lock_duration, bool) or not isinstance(max_lock_duration, int):
            raise ValueError(f"max_lock_duration must be an int, got {max_lock_duration!r}")
        if max_lock_duration <= 0:
            raise ValueError(f"max_lock_duration must be positive, got {max_lock_duration}")

        self.address = address
        self.record = EscrowRecord(
            owner=owner,
            recipient=recipient,
            max_lock_duration=max_lock_duration,
        )
        self._providers = providers
        self._heights = heights

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self.record.owner

    @property
    def recipient(self) -> str:
        return self.record.recipient

    @property
    def asset_kind(self) -> AssetKind | None:
        return self.record.asset_kind

    @property
    def asset_id(self) -> str | None:
        return self.record.asset_id

    @property
    def amount(self) -> int:
        return self.record.amount

    @property
    def unlock_height(self) -> int:
        return self.record.unlock_height

    @property
    def max_lock_duration(self) -> int:
        return self.record.max_lock_duration

    @property
    def funded(self) -> bool:
        return self.record.funded

    @property
    def status(self) -> VaultStatus:
        return self.record.status

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    def fund_with_token(
        self, caller: str, asset_id: str, amount: int, lock_duration: int
    ) -> VaultEvent:
        """Pull ``amount`` of token ``asset_id`` from the owner and lock it."""
        self._check_funding(caller, amount, lock_duration)
        next_status = self._next_status("fund")

        transfer = self._resolve(AssetKind.TOKEN, asset_id)
        available = transfer.balance_of(caller)
        if available < amount:
            raise InsufficientBalanceError(holder=caller, required=amount, available=available)

        try:
            transfer.deposit(caller, self.address, amount)
        except LedgerError as err:
            raise TransferFailedError(err.message) from err

        return self._lock(AssetKind.TOKEN, asset_id, amount, lock_duration, next_status)

    def fund_with_native(self, caller: str, value: int, lock_duration: int) -> VaultEvent:
        """Lock the native ``value`` attached to the call.

        The value travels with the call: the environment moves it into the
        vault within the same transaction, so nothing is transferred here.
        """
        self._check_funding(caller, value, lock_duration)
        next_status = self._next_status("fund")
        return self._lock(AssetKind.NATIVE, None, value, lock_duration, next_status)

    # ------------------------------------------------------------------
    # Withdrawal
    # ------------------------------------------------------------------

    def withdraw_token(self, caller: str) -> VaultEvent:
        """Send the locked token amount to the recipient."""
        return self._withdraw(caller, AssetKind.TOKEN)

    def withdraw_native(self, caller: str) -> VaultEvent:
        """Send the vault's whole native balance to the recipient.

        On a token-funded vault this sweeps any stray native balance and the
        vault stays FUNDED until the tokens are withdrawn.
        """
        return self._withdraw(caller, AssetKind.NATIVE)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_funding(self, caller: str, amount: int, lock_duration: int) -> None:
        require_role(caller, self.record.owner, OWNER)
        if self.record.funded:
            raise AlreadyFundedError(self.address)
        if amount <= 0:
            raise InvalidAmountError(amount)
        if lock_duration <= 0 or lock_duration > self.record.max_lock_duration:
            raise InvalidLockDurationError(lock_duration, self.record.max_lock_duration)

    def _lock(
        self,
        kind: AssetKind,
        asset_id: str | None,
        amount: int,
        lock_duration: int,
        next_status: VaultStatus,
    ) -> VaultEvent:
        height = self._heights.current_height()
        record = self.record
        record.asset_kind = kind
        record.asset_id = asset_id
        record.amount = amount
        record.unlock_height = height + lock_duration
        record.status = next_status
        return VaultEvent(
            event_type=EventType.VAULT_FUNDED,
            vault=self.address,
            height=height,
            data={
                "owner": record.owner,
                "asset_kind": kind.value,
                "asset_id": asset_id,
                "amount": amount,
                "unlock_height": record.unlock_height,
            },
        )

    def _withdraw(self, caller: str, kind: AssetKind) -> VaultEvent:
        record = self.record
        require_role(caller, record.recipient, RECIPIENT)
        if not record.funded:
            raise NotFundedError(self.address)
        height = self._heights.current_height()
        if height < record.unlock_height:
            raise LockNotExpiredError(current_height=height, unlock_height=record.unlock_height)
        next_status = self._next_status("withdraw")

        transfer = self._resolve(kind, record.asset_id)
        amount = transfer.releasable(self.address, record.amount)
        try:
            transfer.release(self.address, record.recipient, amount)
        except LedgerError as err:
            raise TransferFailedError(err.message) from err

        # Only releasing the locked asset kind ends custody
        if kind is record.asset_kind:
            record.status = next_status
        return VaultEvent(
            event_type=EventType.VAULT_WITHDRAWN,
            vault=self.address,
            height=height,
            data={
                "recipient": record.recipient,
                "asset_kind": kind.value,
                "asset_id": record.asset_id if kind is AssetKind.TOKEN else None,
                "amount": amount,
            },
        )

    def _resolve(self, kind: AssetKind, asset_id: str | None) -> AssetTransfer:
        try:
            return self._providers.resolve(kind, asset_id)
        except UnknownAssetError as err:
            raise TransferFailedError(err.message) from err

    def _next_status(self, event_name: str) -> VaultStatus:
        """Validate a state machine transition and return the resulting status.

        Raises InvalidStateTransitionError if the transition is illegal.
        """
        try:
            return VaultStatus(validate_transition(self.record.status.value, event_name))
        except TransitionNotAllowed as err:
            raise InvalidStateTransitionError(self.record.status.value, event_name) from err
