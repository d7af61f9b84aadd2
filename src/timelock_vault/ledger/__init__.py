"""Execution environment — ledgers, transfer providers and the Chain."""

from timelock_vault.ledger.chain import Chain, Receipt
from timelock_vault.ledger.native import NativeLedger, NativeTransfer
from timelock_vault.ledger.registry import AssetRegistry
from timelock_vault.ledger.token import TokenLedger, TokenTransfer

__all__ = [
    "AssetRegistry",
    "Chain",
    "NativeLedger",
    "NativeTransfer",
    "Receipt",
    "TokenLedger",
    "TokenTransfer",
]
