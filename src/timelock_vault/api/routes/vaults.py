"""Vault REST API routes.

Routes:
    POST   /api/v1/vaults                           — Deploy a new vault
    GET    /api/v1/vaults                           — List vaults
    GET    /api/v1/vaults/{address}                 — Get vault details
    GET    /api/v1/vaults/{address}/status          — Get lightweight status check
    GET    /api/v1/vaults/{address}/events          — Get event trail
    POST   /api/v1/vaults/{address}/fund/token      — Owner locks tokens
    POST   /api/v1/vaults/{address}/fund/native     — Owner locks native value
    POST   /api/v1/vaults/{address}/withdraw/token  — Recipient claims tokens
    POST   /api/v1/vaults/{address}/withdraw/native — Recipient claims native value
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from timelock_vault.api.deps import get_vault_service
from timelock_vault.schemas.vault import (
    CreateVaultRequest,
    FundNativeRequest,
    FundTokenRequest,
    VaultEventResponse,
    VaultResponse,
    VaultStatusResponse,
    WithdrawRequest,
)
from timelock_vault.services.vault_service import VaultService

router = APIRouter(prefix="/api/v1/vaults", tags=["Vaults"])


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=VaultResponse,
    status_code=201,
    summary="Deploy a new vault",
)
async def create_vault(
    request: CreateVaultRequest,
    svc: VaultService = Depends(get_vault_service),
) -> VaultResponse:
    """Deploy an unfunded vault owned by ``owner``."""
    vault = svc.create_vault(
        owner=request.owner,
        recipient=request.recipient,
        max_lock_duration=request.max_lock_duration,
    )
    return VaultResponse.model_validate(vault)


# ---------------------------------------------------------------------------
# Fund
# ---------------------------------------------------------------------------


@router.post(
    "/{address}/fund/token",
    response_model=VaultResponse,
    summary="Fund the vault with tokens",
)
async def fund_with_token(
    address: str,
    request: FundTokenRequest,
    svc: VaultService = Depends(get_vault_service),
) -> VaultResponse:
    """Pull approved tokens from the owner into the vault. UNFUNDED -> FUNDED."""
    vault = svc.fund_with_token(
        address=address,
        caller=request.caller,
        asset_id=request.asset_id,
        amount=request.amount,
        lock_duration=request.lock_duration,
    )
    return VaultResponse.model_validate(vault)


@router.post(
    "/{address}/fund/native",
    response_model=VaultResponse,
    summary="Fund the vault with native value",
)
async def fund_with_native(
    address: str,
    request: FundNativeRequest,
    svc: VaultService = Depends(get_vault_service),
) -> VaultResponse:
    """Lock native value attached to the call. UNFUNDED -> FUNDED."""
    vault = svc.fund_with_native(
        address=address,
        caller=request.caller,
        value=request.value,
        lock_duration=request.lock_duration,
    )
    return VaultResponse.model_validate(vault)


# ---------------------------------------------------------------------------
# Withdraw
# ---------------------------------------------------------------------------


@router.post(
    "/{address}/withdraw/token",
    response_model=VaultEventResponse,
    summary="Withdraw the locked tokens",
)
async def withdraw_token(
    address: str,
    request: WithdrawRequest,
    svc: VaultService = Depends(get_vault_service),
) -> VaultEventResponse:
    """Recipient claims the tokens once the unlock height is reached."""
    event = svc.withdraw_token(address=address, caller=request.caller)
    return VaultEventResponse.model_validate(event)


@router.post(
    "/{address}/withdraw/native",
    response_model=VaultEventResponse,
    summary="Withdraw the native balance",
)
async def withdraw_native(
    address: str,
    request: WithdrawRequest,
    svc: VaultService = Depends(get_vault_service),
) -> VaultEventResponse:
    """Recipient claims the vault's native balance once the unlock height is reached."""
    event = svc.withdraw_native(address=address, caller=request.caller)
    return VaultEventResponse.model_validate(event)


# ---------------------------------------------------------------------------
# Read endpoints
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=list[VaultResponse],
    summary="List vaults",
)
async def list_vaults(
    svc: VaultService = Depends(get_vault_service),
) -> list[VaultResponse]:
    return [VaultResponse.model_validate(v) for v in svc.list_vaults()]


@router.get(
    "/{address}",
    response_model=VaultResponse,
    summary="Get vault details",
)
async def get_vault(
    address: str,
    svc: VaultService = Depends(get_vault_service),
) -> VaultResponse:
    """Fetch a vault by its address."""
    return VaultResponse.model_validate(svc.get_vault(address))


@router.get(
    "/{address}/status",
    response_model=VaultStatusResponse,
    summary="Get lightweight status check",
)
async def get_status(
    address: str,
    svc: VaultService = Depends(get_vault_service),
) -> VaultStatusResponse:
    """Return the current status, lock progress and allowed next actions."""
    return VaultStatusResponse(**svc.get_status(address))


@router.get(
    "/{address}/events",
    response_model=list[VaultEventResponse],
    summary="Get event trail",
)
async def get_events(
    address: str,
    svc: VaultService = Depends(get_vault_service),
) -> list[VaultEventResponse]:
    """Return every event the vault emitted, oldest first."""
    return [VaultEventResponse.model_validate(e) for e in svc.get_events(address)]
