"""Shared test fixtures for the Timelock Vault test suite.

Provides:
    - Well-known owner / recipient / outsider addresses
    - A fresh Chain with a deployed token and a funded owner
    - Vault fixtures in the unfunded state
"""

from __future__ import annotations

import pytest

from timelock_vault.ledger.chain import Chain

OWNER = "0x" + "a" * 40
RECIPIENT = "0x" + "b" * 40
OTHER = "0x" + "c" * 40
TOKEN = "T20"
TOKEN_SUPPLY = 100_000_000_000

# ---------------------------------------------------------------------------
# Environment Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def chain() -> Chain:
    """Return a Chain at height 100 where OWNER holds 10_000 T20 and 50 native units."""
    chain = Chain(start_height=100)
    chain.create_token(OTHER, TOKEN, TOKEN_SUPPLY)
    chain.transfer_token(OTHER, TOKEN, OWNER, 10_000)
    chain.faucet(OWNER, 50)
    return chain


@pytest.fixture
def vault(chain: Chain):
    """Return an unfunded vault owned by OWNER for RECIPIENT (max lock 5000)."""
    return chain.deploy_vault(OWNER, RECIPIENT)


@pytest.fixture
def token_vault(chain: Chain, vault):
    """Return a vault funded with 1000 T20 locked for 5 blocks."""
    chain.approve(OWNER, TOKEN, vault.address, 1000)
    chain.fund_with_token(OWNER, vault.address, TOKEN, 1000, 5)
    return vault


@pytest.fixture
def native_vault(chain: Chain, vault):
    """Return a vault funded with 1 native unit locked for 5 blocks."""
    chain.fund_with_native(OWNER, vault.address, 1, 5)
    return vault
