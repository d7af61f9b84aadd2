"""Application services — use case orchestration."""

from timelock_vault.services.ledger_service import LedgerService
from timelock_vault.services.vault_service import VaultService

__all__ = ["LedgerService", "VaultService"]
