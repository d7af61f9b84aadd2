"""Ledger Service — accounts, tokens and block production on the Chain.

Gives the API and the scenario runner what a development node would: a
faucet for native value, token deployment, approvals and manual mining.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from timelock_vault.logging_config import get_logger

if TYPE_CHECKING:
    from timelock_vault.ledger.chain import Chain, Receipt

logger = get_logger(__name__)


class LedgerService:
    """Handles native balances, token ledgers and height on a Chain."""

    def __init__(self, chain: Chain, faucet_amount: int = 0) -> None:
        """Initialize ledger service.

        Args:
            chain: The execution environment to operate on.
            faucet_amount: Native amount credited by ``faucet`` when no amount is given.
        """
        self._chain = chain
        self._faucet_amount = faucet_amount

    def chain_info(self) -> dict:
        return {
            "height": self._chain.current_height(),
            "vault_count": len(self._chain.vaults()),
            "tokens": self._chain.assets.token_ids(),
            "tx_count": len(self._chain.receipts),
        }

    def mine(self, blocks: int = 1) -> int:
        height = self._chain.mine(blocks)
        logger.info("chain.mined", blocks=blocks, height=height)
        return height

    def faucet(self, address: str, amount: int | None = None) -> int:
        """Credit native value to ``address`` and return its new balance."""
        return self._chain.faucet(address, self._faucet_amount if amount is None else amount)

    def send_native(self, sender: str, to: str, value: int) -> Receipt:
        receipt = self._chain.send_native(sender, to, value)
        logger.info("ledger.native_sent", sender=sender, to=to, value=value)
        return receipt

    def create_token(self, sender: str, token_id: str, supply: int) -> Receipt:
        receipt = self._chain.create_token(sender, token_id, supply)
        logger.info("ledger.token_created", token_id=token_id, holder=sender, supply=supply)
        return receipt

    def transfer_token(self, sender: str, token_id: str, to: str, amount: int) -> Receipt:
        receipt = self._chain.transfer_token(sender, token_id, to, amount)
        logger.info("ledger.token_sent", token_id=token_id, sender=sender, to=to, amount=amount)
        return receipt

    def approve(self, sender: str, token_id: str, spender: str, amount: int) -> Receipt:
        receipt = self._chain.approve(sender, token_id, spender, amount)
        logger.info(
            "ledger.approved", token_id=token_id, holder=sender, spender=spender, amount=amount
        )
        return receipt

    def balances(self, address: str) -> dict:
        """Native and per-token balances of ``address``."""
        return {
            "address": address,
            "native": self._chain.native_balance(address),
            "tokens": {
                token_id: self._chain.token_balance(token_id, address)
                for token_id in self._chain.assets.token_ids()
            },
        }
