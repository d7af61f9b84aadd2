"""Pydantic API schemas."""

from timelock_vault.schemas.vault import (
    ApproveRequest,
    BalancesResponse,
    ChainInfoResponse,
    CreateTokenRequest,
    CreateVaultRequest,
    FaucetRequest,
    FundNativeRequest,
    FundTokenRequest,
    HealthResponse,
    MineRequest,
    ReceiptResponse,
    SendNativeRequest,
    TransferTokenRequest,
    VaultEventResponse,
    VaultResponse,
    VaultStatusResponse,
    WithdrawRequest,
)

__all__ = [
    "ApproveRequest",
    "BalancesResponse",
    "ChainInfoResponse",
    "CreateTokenRequest",
    "CreateVaultRequest",
    "FaucetRequest",
    "FundNativeRequest",
    "FundTokenRequest",
    "HealthResponse",
    "MineRequest",
    "ReceiptResponse",
    "SendNativeRequest",
    "TransferTokenRequest",
    "VaultEventResponse",
    "VaultResponse",
    "VaultStatusResponse",
    "WithdrawRequest",
]
