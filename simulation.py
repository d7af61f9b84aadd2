#!/usr/bin/env python3
"""Timelock Vault — End-to-End Simulation.

Runs four scenarios with OwnerBot and RecipientBot against a fresh Chain:

    Scenario A: Token Vault
        - Owner deploys a vault, approves it, and locks 1000 tokens for 1 block
        - A second funding attempt is rejected (ALREADY_FUNDED)
        - After one block the recipient withdraws all 1000 tokens

    Scenario B: Native Vault
        - Owner locks 1 native unit for 5 blocks
        - Recipient withdraws too early (LOCK_NOT_EXPIRED)
        - After 5 blocks the recipient withdraws; the vault is left empty

    Scenario C: Wrong Party
        - The owner tries to withdraw a funded vault (UNAUTHORIZED)

    Scenario D: Empty Deposits
        - Zero-token and zero-value funding attempts are rejected (INVALID_AMOUNT)

Usage:
    uv run python simulation.py
    uv run python simulation.py --scenario B
    uv run python simulation.py --auto-mine
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Configure structured logging BEFORE importing app modules
# ---------------------------------------------------------------------------
from timelock_vault.logging_config import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False)
logger = get_logger("simulation")

from timelock_vault.domain.exceptions import VaultError  # noqa: E402
from timelock_vault.ledger.chain import Chain  # noqa: E402
from timelock_vault.services.ledger_service import LedgerService  # noqa: E402
from timelock_vault.services.vault_service import VaultService  # noqa: E402

TOKEN_ID = "T20"


# ---------------------------------------------------------------------------
# Bot Agents
# ---------------------------------------------------------------------------
@dataclass
class OwnerBot:
    """Simulated owner that deploys and funds vaults."""

    vaults: VaultService
    ledger: LedgerService
    address: str = "0x" + "a" * 40

    def deploy(self, recipient: str) -> str:
        vault = self.vaults.create_vault(owner=self.address, recipient=recipient)
        logger.info("🔵 OWNER: Vault deployed", vault=vault.address)
        return vault.address

    def fund_token(self, vault: str, amount: int, lock_duration: int) -> None:
        self.ledger.approve(self.address, TOKEN_ID, vault, amount)
        self.vaults.fund_with_token(vault, self.address, TOKEN_ID, amount, lock_duration)
        logger.info("🔵 OWNER: Vault funded", vault=vault, token=TOKEN_ID, amount=amount)

    def fund_native(self, vault: str, value: int, lock_duration: int) -> None:
        self.vaults.fund_with_native(vault, self.address, value, lock_duration)
        logger.info("🔵 OWNER: Vault funded", vault=vault, native=value)


@dataclass
class RecipientBot:
    """Simulated recipient that claims vaults."""

    vaults: VaultService
    address: str = "0x" + "b" * 40

    def withdraw_token(self, vault: str) -> int:
        event = self.vaults.withdraw_token(vault, self.address)
        logger.info("🟢 RECIPIENT: Tokens claimed", vault=vault, amount=event.data["amount"])
        return event.data["amount"]

    def withdraw_native(self, vault: str) -> int:
        event = self.vaults.withdraw_native(vault, self.address)
        logger.info("🟢 RECIPIENT: Native claimed", vault=vault, amount=event.data["amount"])
        return event.data["amount"]


# ---------------------------------------------------------------------------
# Print helpers
# ---------------------------------------------------------------------------
def banner(text: str) -> None:
    """Print a prominent banner."""
    width = 70
    print("\n" + "=" * width)
    print(f"  {text}")
    print("=" * width + "\n")


def section(text: str) -> None:
    """Print a section header."""
    print(f"\n--- {text} ---\n")


def expect_rejection(action, expected_code: str) -> None:
    """Run ``action`` and check it is rejected with ``expected_code``."""
    try:
        action()
    except VaultError as exc:
        icon = "✅" if exc.code == expected_code else "❌"
        print(f"  {icon} Rejected: {exc.code} — {exc.message}")
        if exc.code != expected_code:
            raise
        return
    raise AssertionError(f"Expected {expected_code}, but the operation succeeded")


def print_events(vaults: VaultService, address: str) -> None:
    section("Event Trail")
    for event in vaults.get_events(address):
        print(f"  [{event.height:>4}] {event.event_type.value:<16} {event.data}")


def make_world(auto_mine: bool) -> tuple[Chain, OwnerBot, RecipientBot]:
    chain = Chain(auto_mine=auto_mine)
    vaults = VaultService(chain)
    ledger = LedgerService(chain)
    owner = OwnerBot(vaults=vaults, ledger=ledger)
    recipient = RecipientBot(vaults=vaults)
    ledger.create_token(owner.address, TOKEN_ID, 100_000)
    ledger.faucet(owner.address, 10)
    return chain, owner, recipient


# ===========================================================================
# Scenarios
# ===========================================================================
def scenario_a_token_vault(auto_mine: bool = False) -> None:
    banner("SCENARIO A: Token vault, funded once, claimed after 1 block")
    chain, owner, recipient = make_world(auto_mine)
    vaults = owner.vaults

    vault = owner.deploy(recipient.address)
    owner.fund_token(vault, amount=1000, lock_duration=1)
    info = vaults.get_vault(vault)
    print(f"  funded={info.funded} amount={info.amount} unlock_height={info.unlock_height}")

    section("Second funding attempt")
    expect_rejection(lambda: owner.fund_token(vault, amount=10, lock_duration=1), "ALREADY_FUNDED")

    if chain.current_height() < info.unlock_height:
        chain.mine(info.unlock_height - chain.current_height())
    section("Withdraw")
    recipient.withdraw_token(vault)
    print(f"  Recipient {TOKEN_ID} balance: {chain.token_balance(TOKEN_ID, recipient.address)}")
    print_events(vaults, vault)


def scenario_b_native_vault(auto_mine: bool = False) -> None:
    banner("SCENARIO B: Native vault, early withdrawal rejected")
    chain, owner, recipient = make_world(auto_mine)

    vault = owner.deploy(recipient.address)
    owner.fund_native(vault, value=1, lock_duration=5)
    unlock = owner.vaults.get_vault(vault).unlock_height

    section("Early withdrawal")
    if chain.current_height() < unlock:
        expect_rejection(lambda: recipient.withdraw_native(vault), "LOCK_NOT_EXPIRED")

    while chain.current_height() < unlock:
        chain.mine()
    section("Withdraw")
    recipient.withdraw_native(vault)
    print(f"  Vault balance: {chain.native_balance(vault)}")
    print(f"  Recipient balance: {chain.native_balance(recipient.address)}")
    print_events(owner.vaults, vault)


def scenario_c_wrong_party(auto_mine: bool = False) -> None:
    banner("SCENARIO C: Only the recipient may withdraw")
    chain, owner, recipient = make_world(auto_mine)

    vault = owner.deploy(recipient.address)
    owner.fund_token(vault, amount=1000, lock_duration=1)
    chain.mine(10)
    expect_rejection(lambda: owner.vaults.withdraw_token(vault, owner.address), "UNAUTHORIZED")


def scenario_d_empty_deposits(auto_mine: bool = False) -> None:
    banner("SCENARIO D: Zero deposits are rejected")
    _, owner, recipient = make_world(auto_mine)

    vault = owner.deploy(recipient.address)
    expect_rejection(lambda: owner.fund_token(vault, amount=0, lock_duration=1), "INVALID_AMOUNT")
    expect_rejection(lambda: owner.fund_native(vault, value=0, lock_duration=1), "INVALID_AMOUNT")
    print(f"  funded={owner.vaults.get_vault(vault).funded}")


SCENARIOS = {
    "A": scenario_a_token_vault,
    "B": scenario_b_native_vault,
    "C": scenario_c_wrong_party,
    "D": scenario_d_empty_deposits,
}


# ===========================================================================
# Main
# ===========================================================================
def run_all(auto_mine: bool = False) -> None:
    """Run all scenarios sequentially."""
    print("\n" + "🔒" * 35)
    print("  TIMELOCK VAULT — SIMULATION")
    print(f"  Auto-mine: {auto_mine}")
    print("🔒" * 35 + "\n")

    for scenario in SCENARIOS.values():
        scenario(auto_mine)

    print("\n" + "=" * 70)
    print("  ✅ ALL SCENARIOS COMPLETED SUCCESSFULLY")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Timelock Vault Simulation")
    parser.add_argument(
        "--scenario",
        type=str.upper,
        choices=sorted(SCENARIOS),
        default=None,
        help="Run a specific scenario (A, B, C or D). Default: run all.",
    )
    parser.add_argument(
        "--auto-mine",
        action="store_true",
        help="Mine one block after every successful transaction.",
    )
    args = parser.parse_args()

    if args.scenario is None:
        run_all(auto_mine=args.auto_mine)
    else:
        SCENARIOS[args.scenario](args.auto_mine)
