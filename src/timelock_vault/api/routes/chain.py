"""Chain REST API routes — the development-node surface.

Routes:
    GET    /api/v1/chain                             — Height, vaults, tokens
    POST   /api/v1/chain/mine                        — Advance the height
    POST   /api/v1/chain/faucet                      — Credit native value
    POST   /api/v1/chain/native/send                 — Plain native transfer
    POST   /api/v1/chain/tokens                      — Deploy a fixed-supply token
    POST   /api/v1/chain/tokens/{token_id}/approve   — Approve a spender
    POST   /api/v1/chain/tokens/{token_id}/transfer  — Transfer tokens
    GET    /api/v1/chain/balances/{address}          — Native and token balances
    GET    /api/v1/chain/receipts                    — Transaction history
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from timelock_vault.api.deps import get_chain, get_ledger_service
from timelock_vault.ledger.chain import Chain
from timelock_vault.schemas.vault import (
    ApproveRequest,
    BalancesResponse,
    ChainInfoResponse,
    CreateTokenRequest,
    FaucetRequest,
    MineRequest,
    ReceiptResponse,
    SendNativeRequest,
    TransferTokenRequest,
)
from timelock_vault.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/v1/chain", tags=["Chain"])


@router.get("", response_model=ChainInfoResponse, summary="Chain summary")
async def chain_info(
    svc: LedgerService = Depends(get_ledger_service),
) -> ChainInfoResponse:
    return ChainInfoResponse(**svc.chain_info())


@router.post("/mine", response_model=ChainInfoResponse, summary="Mine blocks")
async def mine(
    request: MineRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> ChainInfoResponse:
    svc.mine(request.blocks)
    return ChainInfoResponse(**svc.chain_info())


@router.post("/faucet", response_model=BalancesResponse, summary="Credit native value")
async def faucet(
    request: FaucetRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> BalancesResponse:
    svc.faucet(request.address, request.amount)
    return BalancesResponse(**svc.balances(request.address))


@router.post("/native/send", response_model=ReceiptResponse, summary="Send native value")
async def send_native(
    request: SendNativeRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> ReceiptResponse:
    receipt = svc.send_native(request.sender, request.to, request.value)
    return ReceiptResponse.model_validate(receipt)


@router.post(
    "/tokens",
    response_model=ReceiptResponse,
    status_code=201,
    summary="Deploy a fixed-supply token",
)
async def create_token(
    request: CreateTokenRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> ReceiptResponse:
    receipt = svc.create_token(request.holder, request.token_id, request.supply)
    return ReceiptResponse.model_validate(receipt)


@router.post(
    "/tokens/{token_id}/approve",
    response_model=ReceiptResponse,
    summary="Approve a spender",
)
async def approve(
    token_id: str,
    request: ApproveRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> ReceiptResponse:
    receipt = svc.approve(request.holder, token_id, request.spender, request.amount)
    return ReceiptResponse.model_validate(receipt)


@router.post(
    "/tokens/{token_id}/transfer",
    response_model=ReceiptResponse,
    summary="Transfer tokens",
)
async def transfer_token(
    token_id: str,
    request: TransferTokenRequest,
    svc: LedgerService = Depends(get_ledger_service),
) -> ReceiptResponse:
    receipt = svc.transfer_token(request.sender, token_id, request.to, request.amount)
    return ReceiptResponse.model_validate(receipt)


@router.get(
    "/balances/{address}",
    response_model=BalancesResponse,
    summary="Native and token balances",
)
async def balances(
    address: str,
    svc: LedgerService = Depends(get_ledger_service),
) -> BalancesResponse:
    return BalancesResponse(**svc.balances(address))


@router.get(
    "/receipts",
    response_model=list[ReceiptResponse],
    summary="Transaction history",
)
async def receipts(chain: Chain = Depends(get_chain)) -> list[ReceiptResponse]:
    return [ReceiptResponse.model_validate(r) for r in chain.receipts]
