"""Pydantic schemas for the Vault API.

These schemas define the request/response shapes for the REST API. They are
separate from the domain dataclasses to keep the API and domain layers apart.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"

Address = Annotated[
    str,
    Field(
        min_length=42,
        max_length=42,
        pattern=ADDRESS_PATTERN,
        description="Account address (0x-prefixed, 42 chars)",
        examples=["0x742d35Cc6634C0532925a3b844Bc9e7595f2bD18"],
    ),
]

# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------


class CreateVaultRequest(BaseModel):
    """Request body for deploying a new vault."""

    owner: Address
    recipient: Address
    max_lock_duration: int | None = Field(
        default=None,
        gt=0,
        description="Upper bound on the lock duration in blocks (defaults to settings)",
    )


class FundTokenRequest(BaseModel):
    """Request body for funding a vault with tokens.

    Amount and duration are validated by the vault itself so the rejection
    carries the vault's own error code.
    """

    caller: Address
    asset_id: str = Field(..., min_length=1, max_length=64, description="Token ledger id")
    amount: int = Field(..., description="Token units to lock")
    lock_duration: int = Field(..., description="Blocks until the recipient may withdraw")


class FundNativeRequest(BaseModel):
    """Request body for funding a vault with native value attached to the call."""

    caller: Address
    value: int = Field(..., description="Native units attached to the call")
    lock_duration: int = Field(..., description="Blocks until the recipient may withdraw")


class WithdrawRequest(BaseModel):
    """Request body for a withdrawal."""

    caller: Address


class MineRequest(BaseModel):
    blocks: int = Field(default=1, ge=1, le=1_000_000)


class FaucetRequest(BaseModel):
    address: Address
    amount: int | None = Field(default=None, ge=0)


class CreateTokenRequest(BaseModel):
    """Request body for deploying a fixed-supply token."""

    holder: Address
    token_id: str = Field(..., min_length=1, max_length=64)
    supply: int = Field(..., gt=0)


class ApproveRequest(BaseModel):
    holder: Address
    spender: Address
    amount: int = Field(..., ge=0)


class TransferTokenRequest(BaseModel):
    sender: Address
    to: Address
    amount: int = Field(..., ge=0)


class SendNativeRequest(BaseModel):
    sender: Address
    to: Address
    value: int = Field(..., ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------


class VaultResponse(BaseModel):
    """Read-only surface of a vault."""

    model_config = ConfigDict(from_attributes=True)

    address: str
    owner: str
    recipient: str
    asset_kind: str | None
    asset_id: str | None
    amount: int
    unlock_height: int
    max_lock_duration: int
    funded: bool
    status: str


class VaultStatusResponse(BaseModel):
    """Lightweight status check response."""

    address: str
    status: str
    funded: bool
    current_height: int
    unlock_height: int | None
    blocks_remaining: int | None
    withdrawable: bool
    allowed_events: list[str] = Field(
        description="State machine events that can fire from the current status"
    )


class VaultEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_type: str
    vault: str
    height: int
    data: dict


class ReceiptResponse(BaseModel):
    """Outcome of one transaction on the Chain."""

    model_config = ConfigDict(from_attributes=True)

    tx_index: int
    height: int
    sender: str
    method: str
    success: bool
    error_code: str | None = None
    error_message: str | None = None
    events: list[VaultEventResponse] = Field(default_factory=list)


class ChainInfoResponse(BaseModel):
    height: int
    vault_count: int
    tokens: list[str]
    tx_count: int


class BalancesResponse(BaseModel):
    address: str
    native: int
    tokens: dict[str, int]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    height: int = 0
