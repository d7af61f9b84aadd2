"""Token ledger (fixed-supply, allowance-based) and its transfer provider.

Balances and allowances follow the usual fungible-token rules: a spender
may move a holder's tokens only up to the allowance the holder approved,
and the allowance is checked before the balance.
"""

from __future__ import annotations

from timelock_vault.domain.enums import AssetKind
from timelock_vault.domain.exceptions import LedgerError
from timelock_vault.logging_config import get_logger

logger = get_logger(__name__)


class TokenLedger:
    """One named token: balances plus (holder, spender) allowances."""

    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self._allowances.get((holder, spender), 0)

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError(f"Cannot mint a negative amount: {amount}")
        self._balances[to] = self.balance_of(to) + amount

    def approve(self, holder: str, spender: str, amount: int) -> None:
        """Set (not add to) the amount ``spender`` may move out of ``holder``."""
        if amount < 0:
            raise LedgerError(f"Cannot approve a negative amount: {amount}")
        self._allowances[(holder, spender)] = amount

    def transfer(self, source: str, destination: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError(f"Cannot transfer a negative amount: {amount}")
        self._move(source, destination, amount)

    def transfer_from(self, spender: str, holder: str, destination: str, amount: int) -> None:
        """Spender moves ``amount`` from ``holder`` to ``destination`` using its allowance."""
        if amount < 0:
            raise LedgerError(f"Cannot transfer a negative amount: {amount}")
        current = self.allowance(holder, spender)
        if current < amount:
            raise LedgerError(
                f"TOKEN:ALLOWANCE_LOW {spender} may spend {current} of {holder}, needs {amount}"
            )
        self._move(holder, destination, amount)
        self._allowances[(holder, spender)] = current - amount

    def snapshot(self) -> tuple[dict[str, int], dict[tuple[str, str], int]]:
        return dict(self._balances), dict(self._allowances)

    def restore(self, snapshot: tuple[dict[str, int], dict[tuple[str, str], int]]) -> None:
        balances, allowances = snapshot
        self._balances = dict(balances)
        self._allowances = dict(allowances)

    def _move(self, source: str, destination: str, amount: int) -> None:
        if amount == 0:
            return
        available = self.balance_of(source)
        if available < amount:
            raise LedgerError(
                f"TOKEN:INSUFFICIENT_BALANCE {source} has {available} {self.token_id}, "
                f"needs {amount}"
            )
        self._balances[source] = available - amount
        self._balances[destination] = self.balance_of(destination) + amount
        logger.debug(
            "ledger.transfer",
            asset=self.token_id,
            from_address=source,
            to_address=destination,
            amount=amount,
        )


class TokenTransfer:
    """AssetTransfer over one token ledger.

    Deposits spend the holder's allowance to the escrow; withdrawals move
    exactly the locked amount.
    """

    kind = AssetKind.TOKEN

    def __init__(self, ledger: TokenLedger) -> None:
        self._ledger = ledger

    @property
    def token_id(self) -> str:
        return self._ledger.token_id

    def balance_of(self, holder: str) -> int:
        return self._ledger.balance_of(holder)

    def deposit(self, holder: str, escrow: str, amount: int) -> None:
        self._ledger.transfer_from(escrow, holder, escrow, amount)

    def release(self, escrow: str, destination: str, amount: int) -> None:
        self._ledger.transfer(escrow, destination, amount)

    def releasable(self, escrow: str, locked_amount: int) -> int:
        return locked_amount
