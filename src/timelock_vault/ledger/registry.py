"""Asset registry — the environment's directory of ledgers.

Implements the TransferProviders protocol: this is the one place that turns
an (AssetKind, asset_id) pair into a concrete transfer provider.
"""

from __future__ import annotations

from timelock_vault.domain.enums import AssetKind
from timelock_vault.domain.exceptions import LedgerError, UnknownAssetError
from timelock_vault.domain.transfer_protocol import AssetTransfer
from timelock_vault.ledger.native import NativeLedger, NativeTransfer
from timelock_vault.ledger.token import TokenLedger, TokenTransfer


class AssetRegistry:
    """Native ledger plus token ledgers keyed by token id."""

    def __init__(self) -> None:
        self.native = NativeLedger()
        self._tokens: dict[str, TokenLedger] = {}

    def create_token(self, token_id: str, holder: str, supply: int) -> TokenLedger:
        """Register a fixed-supply token with its whole supply minted to ``holder``."""
        if token_id in self._tokens:
            raise LedgerError(f"Token already exists: {token_id}")
        if supply <= 0:
            raise LedgerError(f"Token supply must be positive, got {supply}")
        ledger = TokenLedger(token_id)
        ledger.mint(holder, supply)
        self._tokens[token_id] = ledger
        return ledger

    def token(self, token_id: str | None) -> TokenLedger:
        ledger = self._tokens.get(token_id) if token_id is not None else None
        if ledger is None:
            raise UnknownAssetError(token_id)
        return ledger

    def token_ids(self) -> list[str]:
        return sorted(self._tokens)

    def resolve(self, kind: AssetKind, asset_id: str | None = None) -> AssetTransfer:
        if kind is AssetKind.NATIVE:
            return NativeTransfer(self.native)
        return TokenTransfer(self.token(asset_id))

    def snapshot(self) -> dict:
        return {
            "native": self.native.snapshot(),
            "tokens": {tid: ledger.snapshot() for tid, ledger in self._tokens.items()},
        }

    def restore(self, snapshot: dict) -> None:
        self.native.restore(snapshot["native"])
        # Tokens created after the snapshot are dropped
        self._tokens = {
            tid: ledger for tid, ledger in self._tokens.items() if tid in snapshot["tokens"]
        }
        for tid, state in snapshot["tokens"].items():
            self._tokens[tid].restore(state)
