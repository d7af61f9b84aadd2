"""Asset-Transfer and Height-Source Protocols.

Defines the narrow interfaces the vault consumes from its execution
environment. These are Protocols (structural subtyping) so concrete ledgers
don't need to inherit from a base class — they just need to match the shape.

The domain layer has ZERO imports from the ledger package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from timelock_vault.domain.enums import AssetKind


@runtime_checkable
class AssetTransfer(Protocol):
    """Moves one kind of asset on the vault's behalf.

    Concrete implementations:
        - ledger/native.py  (NativeTransfer)
        - ledger/token.py   (TokenTransfer)
    """

    kind: AssetKind

    def balance_of(self, holder: str) -> int:
        """Return the balance ``holder`` currently has of this asset."""
        ...

    def deposit(self, holder: str, escrow: str, amount: int) -> None:
        """Move ``amount`` from ``holder`` into the custody of ``escrow``.

        Raises:
            LedgerError: If the ledger refuses the debit.
        """
        ...

    def release(self, escrow: str, destination: str, amount: int) -> None:
        """Move ``amount`` out of ``escrow`` custody to ``destination``.

        Raises:
            LedgerError: If the ledger refuses the debit.
        """
        ...

    def releasable(self, escrow: str, locked_amount: int) -> int:
        """Return how much a withdrawal from ``escrow`` should move."""
        ...


@runtime_checkable
class TransferProviders(Protocol):
    """Resolves the transfer provider for an asset kind (and token id)."""

    def resolve(self, kind: AssetKind, asset_id: str | None = None) -> AssetTransfer:
        """Return the provider for ``kind``.

        Raises:
            UnknownAssetError: If ``kind`` is TOKEN and ``asset_id`` is unknown.
        """
        ...


@runtime_checkable
class HeightSource(Protocol):
    """Monotonically non-decreasing counter (block height). Read-only for the vault."""

    def current_height(self) -> int:
        ...
