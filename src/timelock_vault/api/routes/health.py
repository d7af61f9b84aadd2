"""Health check endpoint.

Reports that the application is up and the height its Chain is at.
Used by Docker healthchecks, load balancers, and monitoring systems.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from timelock_vault import __version__
from timelock_vault.api.deps import get_chain
from timelock_vault.ledger.chain import Chain
from timelock_vault.schemas.vault import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the application and its Chain height.",
)
async def health_check(chain: Chain = Depends(get_chain)) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, height=chain.current_height())
