"""FastAPI dependency injection providers.

These are used with Depends() in route handlers to inject the Chain, the
services bound to it, and configuration.
"""

from __future__ import annotations

from fastapi import Depends, Request

from timelock_vault.config import Settings
from timelock_vault.ledger.chain import Chain
from timelock_vault.services.ledger_service import LedgerService
from timelock_vault.services.vault_service import VaultService


def get_chain(request: Request) -> Chain:
    """Provide the Chain owned by the running application."""
    return request.app.state.chain


def get_app_settings(request: Request) -> Settings:
    """Provide the settings the application was created with."""
    return request.app.state.settings


def get_vault_service(chain: Chain = Depends(get_chain)) -> VaultService:
    """Provide a VaultService bound to the application's Chain."""
    return VaultService(chain)


def get_ledger_service(
    chain: Chain = Depends(get_chain),
    settings: Settings = Depends(get_app_settings),
) -> LedgerService:
    """Provide a LedgerService bound to the application's Chain."""
    return LedgerService(chain, faucet_amount=settings.native_faucet_amount)
