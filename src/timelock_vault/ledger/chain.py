"""In-process execution environment for vaults.

The Chain plays the part of the network a vault is deployed on:

    - a block-height counter (the vault's HeightSource), advanced only by ``mine``
    - the asset registry (native + token ledgers)
    - vault deployment with deterministic addresses
    - transactions, executed one at a time, each all-or-nothing

Every transaction runs against a snapshot of the ledgers and vault records.
If the operation raises a VaultError the snapshot is restored, a failed
Receipt is recorded and the error is re-raised to the caller. The native
value attached to ``fund_with_native`` moves inside the same transaction, so
it never leaves the sender when funding is rejected.

The Chain is not thread-safe. Callers serialize access (the HTTP API only
touches it from the event loop, with no await inside a transaction).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from timelock_vault.domain.enums import AssetKind, EventType
from timelock_vault.domain.exceptions import (
    InsufficientBalanceError,
    VaultError,
    VaultNotFoundError,
)
from timelock_vault.domain.vault import DEFAULT_MAX_LOCK_DURATION, Vault, VaultEvent
from timelock_vault.ledger.registry import AssetRegistry
from timelock_vault.logging_config import get_logger, transaction_context

if TYPE_CHECKING:
    from collections.abc import Callable

    from timelock_vault.config import Settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class Receipt:
    """Outcome of one transaction.

    Attributes:
        tx_index: Position of the transaction in the chain's history.
        height: Height the transaction executed at.
        sender: Address that sent the transaction.
        method: Operation name (e.g. "fund_with_token").
        success: False when the operation was rejected and rolled back.
        error_code: VaultError code of the rejection, if any.
        error_message: Human-readable rejection reason, if any.
        events: Vault events emitted by a successful transaction.
    """

    tx_index: int
    height: int
    sender: str
    method: str
    success: bool
    error_code: str | None = None
    error_message: str | None = None
    events: tuple[VaultEvent, ...] = ()

    def to_dict(self) -> dict:
        return {
            "tx_index": self.tx_index,
            "height": self.height,
            "sender": self.sender,
            "method": self.method,
            "success": self.success,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "events": [event.to_dict() for event in self.events],
        }


class Chain:
    """Serialized, atomic execution environment holding ledgers and vaults."""

    def __init__(
        self,
        *,
        start_height: int = 0,
        auto_mine: bool = False,
        default_max_lock_duration: int = DEFAULT_MAX_LOCK_DURATION,
    ) -> None:
        if start_height < 0:
            raise ValueError(f"start_height must be >= 0, got {start_height}")
        self.assets = AssetRegistry()
        self.default_max_lock_duration = default_max_lock_duration
        self.receipts: list[Receipt] = []
        self._height = start_height
        self._auto_mine = auto_mine
        self._vaults: dict[str, Vault] = {}
        self._deploy_nonces: dict[str, int] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> Chain:
        return cls(
            start_height=settings.chain_start_height,
            auto_mine=settings.chain_auto_mine,
            default_max_lock_duration=settings.default_max_lock_duration,
        )

    # ------------------------------------------------------------------
    # Height
    # ------------------------------------------------------------------

    def current_height(self) -> int:
        return self._height

    def mine(self, blocks: int = 1) -> int:
        """Advance the height by ``blocks`` and return the new height."""
        if blocks < 1:
            raise ValueError(f"blocks must be >= 1, got {blocks}")
        self._height += blocks
        logger.debug("chain.block_mined", height=self._height, blocks=blocks)
        return self._height

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_vault(self, address: str) -> Vault:
        vault = self._vaults.get(address)
        if vault is None:
            raise VaultNotFoundError(address)
        return vault

    def vaults(self) -> list[Vault]:
        return list(self._vaults.values())

    def events_for(self, address: str) -> list[VaultEvent]:
        """Return every event a vault emitted, oldest first."""
        self.get_vault(address)
        return [
            event
            for receipt in self.receipts
            if receipt.success
            for event in receipt.events
            if event.vault == address
        ]

    def native_balance(self, address: str) -> int:
        return self.assets.native.balance_of(address)

    def token_balance(self, token_id: str, address: str) -> int:
        return self.assets.token(token_id).balance_of(address)

    def faucet(self, address: str, amount: int) -> int:
        """Credit native value to ``address`` outside any transaction."""
        self.assets.native.credit(address, amount)
        logger.info("chain.faucet", address=address, amount=amount)
        return self.assets.native.balance_of(address)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def deploy_vault(
        self,
        sender: str,
        recipient: str,
        max_lock_duration: int | None = None,
    ) -> Vault:
        """Create an unfunded vault owned by ``sender``."""
        nonce = self._deploy_nonces.get(sender, 0)
        vault = Vault(
            address=self._derive_address(sender, nonce),
            owner=sender,
            recipient=recipient,
            providers=self.assets,
            heights=self,
            max_lock_duration=(
                self.default_max_lock_duration if max_lock_duration is None else max_lock_duration
            ),
        )

        def _deploy() -> list[VaultEvent]:
            self._vaults[vault.address] = vault
            self._deploy_nonces[sender] = nonce + 1
            return [
                VaultEvent(
                    event_type=EventType.VAULT_CREATED,
                    vault=vault.address,
                    height=self._height,
                    data={
                        "owner": vault.owner,
                        "recipient": vault.recipient,
                        "max_lock_duration": vault.max_lock_duration,
                    },
                )
            ]

        self._execute(sender, "create", _deploy, vault=vault.address)
        return vault

    def fund_with_token(
        self,
        sender: str,
        vault_address: str,
        asset_id: str,
        amount: int,
        lock_duration: int,
    ) -> Receipt:
        vault = self.get_vault(vault_address)
        return self._execute(
            sender,
            "fund_with_token",
            lambda: [vault.fund_with_token(sender, asset_id, amount, lock_duration)],
            vault=vault.address,
        )

    def fund_with_native(
        self,
        sender: str,
        vault_address: str,
        value: int,
        lock_duration: int,
    ) -> Receipt:
        """Fund with ``value`` attached; the value lands in the vault in the same transaction."""
        vault = self.get_vault(vault_address)

        def _fund() -> list[VaultEvent]:
            event = vault.fund_with_native(sender, value, lock_duration)
            native = self.assets.resolve(AssetKind.NATIVE)
            available = native.balance_of(sender)
            if available < value:
                raise InsufficientBalanceError(holder=sender, required=value, available=available)
            native.deposit(sender, vault.address, value)
            return [event]

        return self._execute(sender, "fund_with_native", _fund, vault=vault.address)

    def withdraw_token(self, sender: str, vault_address: str) -> Receipt:
        vault = self.get_vault(vault_address)
        return self._execute(
            sender, "withdraw_token", lambda: [vault.withdraw_token(sender)], vault=vault.address
        )

    def withdraw_native(self, sender: str, vault_address: str) -> Receipt:
        vault = self.get_vault(vault_address)
        return self._execute(
            sender, "withdraw_native", lambda: [vault.withdraw_native(sender)], vault=vault.address
        )

    def send_native(self, sender: str, to: str, value: int) -> Receipt:
        """Plain value transfer; sending to a vault address bypasses its funding path."""

        def _send() -> list[VaultEvent]:
            self.assets.native.transfer(sender, to, value)
            return []

        return self._execute(sender, "send_native", _send)

    def create_token(self, sender: str, token_id: str, supply: int) -> Receipt:
        """Deploy a fixed-supply token whose whole supply goes to ``sender``."""

        def _create() -> list[VaultEvent]:
            self.assets.create_token(token_id, sender, supply)
            return []

        return self._execute(sender, "create_token", _create)

    def transfer_token(self, sender: str, token_id: str, to: str, amount: int) -> Receipt:
        def _transfer() -> list[VaultEvent]:
            self.assets.token(token_id).transfer(sender, to, amount)
            return []

        return self._execute(sender, "transfer_token", _transfer)

    def approve(self, sender: str, token_id: str, spender: str, amount: int) -> Receipt:
        def _approve() -> list[VaultEvent]:
            self.assets.token(token_id).approve(sender, spender, amount)
            return []

        return self._execute(sender, "approve", _approve)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _execute(
        self,
        sender: str,
        method: str,
        operation: Callable[[], list[VaultEvent]],
        vault: str | None = None,
    ) -> Receipt:
        snapshot = self._snapshot()
        tx_index = len(self.receipts)
        height = self._height

        with transaction_context(tx_index, method, sender, vault):
            try:
                events = operation()
            except VaultError as exc:
                self._restore(snapshot)
                self.receipts.append(
                    Receipt(
                        tx_index=tx_index,
                        height=height,
                        sender=sender,
                        method=method,
                        success=False,
                        error_code=exc.code,
                        error_message=exc.message,
                    )
                )
                logger.warning("chain.tx_reverted", code=exc.code, error=exc.message)
                raise

            receipt = Receipt(
                tx_index=tx_index,
                height=height,
                sender=sender,
                method=method,
                success=True,
                events=tuple(events),
            )
            self.receipts.append(receipt)
            logger.debug("chain.tx_applied", events=len(receipt.events))

        if self._auto_mine:
            self.mine()
        return receipt

    def _snapshot(self) -> tuple[dict, dict[str, Vault], dict]:
        return (
            self.assets.snapshot(),
            dict(self._vaults),
            {address: replace(vault.record) for address, vault in self._vaults.items()},
        )

    def _restore(self, snapshot: tuple[dict, dict[str, Vault], dict]) -> None:
        assets, vaults, records = snapshot
        self.assets.restore(assets)
        self._vaults = dict(vaults)
        for address, record in records.items():
            self._vaults[address].record = record

    @staticmethod
    def _derive_address(sender: str, nonce: int) -> str:
        digest = hashlib.sha256(f"{sender}:{nonce}".encode()).hexdigest()
        return "0x" + digest[:40]
