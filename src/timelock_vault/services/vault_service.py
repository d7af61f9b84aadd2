"""Vault Service — application logic for the vault lifecycle.

This is the application layer that coordinates between:
    - The Chain (serialized, atomic execution environment)
    - The domain Vault (funding / withdrawal rules)
    - Structured logging of every outcome

Both the REST routes and the scenario runner call into this service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from timelock_vault.domain.exceptions import VaultError
from timelock_vault.domain.state_machine import VaultStateMachine
from timelock_vault.logging_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from timelock_vault.domain.vault import Vault, VaultEvent
    from timelock_vault.ledger.chain import Chain, Receipt

logger = get_logger(__name__)


class VaultService:
    """Manages vault creation, funding and withdrawal on a Chain."""

    def __init__(self, chain: Chain) -> None:
        self._chain = chain

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_vault(
        self,
        owner: str,
        recipient: str,
        max_lock_duration: int | None = None,
    ) -> Vault:
        """Deploy a new unfunded vault owned by ``owner``."""
        vault = self._chain.deploy_vault(owner, recipient, max_lock_duration)
        logger.info(
            "vault.created",
            vault=vault.address,
            owner=owner,
            recipient=recipient,
            max_lock_duration=vault.max_lock_duration,
        )
        return vault

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    def fund_with_token(
        self,
        address: str,
        caller: str,
        asset_id: str,
        amount: int,
        lock_duration: int,
    ) -> Vault:
        """Lock ``amount`` of token ``asset_id``; the owner must have approved the vault."""
        self._transact(
            "fund_with_token",
            address,
            caller,
            lambda: self._chain.fund_with_token(caller, address, asset_id, amount, lock_duration),
        )
        vault = self._chain.get_vault(address)
        logger.info(
            "vault.funded",
            vault=address,
            asset_kind=str(vault.asset_kind),
            asset_id=asset_id,
            amount=amount,
            unlock_height=vault.unlock_height,
        )
        return vault

    def fund_with_native(
        self,
        address: str,
        caller: str,
        value: int,
        lock_duration: int,
    ) -> Vault:
        """Lock ``value`` units of native currency sent along with the call."""
        self._transact(
            "fund_with_native",
            address,
            caller,
            lambda: self._chain.fund_with_native(caller, address, value, lock_duration),
        )
        vault = self._chain.get_vault(address)
        logger.info(
            "vault.funded",
            vault=address,
            asset_kind=str(vault.asset_kind),
            amount=value,
            unlock_height=vault.unlock_height,
        )
        return vault

    # ------------------------------------------------------------------
    # Withdrawal
    # ------------------------------------------------------------------

    def withdraw_token(self, address: str, caller: str) -> VaultEvent:
        """Release the locked tokens to the recipient."""
        receipt = self._transact(
            "withdraw_token",
            address,
            caller,
            lambda: self._chain.withdraw_token(caller, address),
        )
        return self._log_withdrawal(receipt)

    def withdraw_native(self, address: str, caller: str) -> VaultEvent:
        """Release the vault's native balance to the recipient."""
        receipt = self._transact(
            "withdraw_native",
            address,
            caller,
            lambda: self._chain.withdraw_native(caller, address),
        )
        return self._log_withdrawal(receipt)

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_vault(self, address: str) -> Vault:
        """Get a vault or raise VaultNotFoundError."""
        return self._chain.get_vault(address)

    def list_vaults(self) -> list[Vault]:
        return self._chain.vaults()

    def get_status(self, address: str) -> dict:
        """Get vault status with allowed events and lock progress."""
        vault = self._chain.get_vault(address)
        sm = VaultStateMachine(current_status=vault.status.value)
        height = self._chain.current_height()
        blocks_remaining = max(vault.unlock_height - height, 0) if vault.funded else None
        return {
            "address": vault.address,
            "status": vault.status.value,
            "funded": vault.funded,
            "current_height": height,
            "unlock_height": vault.unlock_height if vault.funded else None,
            "blocks_remaining": blocks_remaining,
            "withdrawable": vault.funded and height >= vault.unlock_height,
            "allowed_events": sm.get_allowed_events(),
        }

    def get_events(self, address: str) -> list[VaultEvent]:
        """Get the vault's event trail."""
        return self._chain.events_for(address)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _transact(
        self,
        operation: str,
        address: str,
        caller: str,
        send: Callable[[], Receipt],
    ) -> Receipt:
        try:
            return send()
        except VaultError as exc:
            logger.info(
                "vault.rejected",
                operation=operation,
                vault=address,
                caller=caller,
                code=exc.code,
                reason=exc.message,
            )
            raise

    def _log_withdrawal(self, receipt: Receipt) -> VaultEvent:
        event = receipt.events[0]
        logger.info(
            "vault.withdrawn",
            vault=event.vault,
            recipient=event.data["recipient"],
            asset_kind=event.data["asset_kind"],
            amount=event.data["amount"],
            height=event.height,
        )
        return event
