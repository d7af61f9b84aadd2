"""Native-currency ledger and its transfer provider.

The native ledger is a plain address -> balance map. Value is pushed from
one address to another; there are no allowances.
"""

from __future__ import annotations

from timelock_vault.domain.enums import AssetKind
from timelock_vault.domain.exceptions import LedgerError
from timelock_vault.logging_config import get_logger

logger = get_logger(__name__)


class NativeLedger:
    """Balances of the environment's native currency."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def credit(self, holder: str, amount: int) -> None:
        """Create ``amount`` new units for ``holder`` (faucet / genesis allocation)."""
        if amount < 0:
            raise LedgerError(f"Cannot credit a negative amount: {amount}")
        self._balances[holder] = self.balance_of(holder) + amount

    def transfer(self, source: str, destination: str, amount: int) -> None:
        """Push ``amount`` from ``source`` to ``destination``."""
        if amount < 0:
            raise LedgerError(f"Cannot transfer a negative amount: {amount}")
        if amount == 0:
            return
        available = self.balance_of(source)
        if available < amount:
            raise LedgerError(
                f"NATIVE:INSUFFICIENT_BALANCE {source} has {available}, needs {amount}"
            )
        self._balances[source] = available - amount
        self._balances[destination] = self.balance_of(destination) + amount
        logger.debug(
            "ledger.transfer",
            asset="native",
            from_address=source,
            to_address=destination,
            amount=amount,
        )

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def restore(self, snapshot: dict[str, int]) -> None:
        self._balances = dict(snapshot)


class NativeTransfer:
    """AssetTransfer over the native ledger.

    A withdrawal releases the escrow's whole native balance, including any
    value that reached the escrow address outside the funding path.
    """

    kind = AssetKind.NATIVE

    def __init__(self, ledger: NativeLedger) -> None:
        self._ledger = ledger

    def balance_of(self, holder: str) -> int:
        return self._ledger.balance_of(holder)

    def deposit(self, holder: str, escrow: str, amount: int) -> None:
        self._ledger.transfer(holder, escrow, amount)

    def release(self, escrow: str, destination: str, amount: int) -> None:
        self._ledger.transfer(escrow, destination, amount)

    def releasable(self, escrow: str, locked_amount: int) -> int:
        return self._ledger.balance_of(escrow)
