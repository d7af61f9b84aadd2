"""Tests for the Chain execution environment.

Covers the end-to-end scenarios (token vault, native vault, wrong party,
empty deposits), transaction atomicity and receipts.
"""

from __future__ import annotations

import pytest
import structlog
from structlog.testing import LogCapture

from conftest import OTHER, OWNER, RECIPIENT, TOKEN
from timelock_vault.config import Settings
from timelock_vault.domain.enums import EventType, VaultStatus
from timelock_vault.domain.exceptions import (
    AlreadyFundedError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidLockDurationError,
    LockNotExpiredError,
    TransferFailedError,
    UnauthorizedError,
    VaultNotFoundError,
)
from timelock_vault.ledger.chain import Chain


class TestScenarios:
    def test_scenario_a_token_funded_exactly_once(self, chain: Chain, vault) -> None:
        height = chain.current_height()
        chain.approve(OWNER, TOKEN, vault.address, 1000)

        chain.fund_with_token(OWNER, vault.address, TOKEN, 1000, 1)

        assert vault.funded is True
        assert vault.unlock_height == height + 1
        assert chain.token_balance(TOKEN, OWNER) == 9000
        assert chain.token_balance(TOKEN, vault.address) == 1000

        with pytest.raises(AlreadyFundedError):
            chain.fund_with_token(OWNER, vault.address, TOKEN, 10, 1)

        chain.mine()
        chain.withdraw_token(RECIPIENT, vault.address)
        assert chain.token_balance(TOKEN, RECIPIENT) == 1000
        assert chain.token_balance(TOKEN, vault.address) == 0

    def test_scenario_b_native_lock(self, chain: Chain, vault) -> None:
        height = chain.current_height()
        chain.fund_with_native(OWNER, vault.address, 1, 5)
        assert chain.native_balance(vault.address) == 1

        with pytest.raises(LockNotExpiredError):
            chain.withdraw_native(RECIPIENT, vault.address)
        chain.mine(4)
        with pytest.raises(LockNotExpiredError):
            chain.withdraw_native(RECIPIENT, vault.address)
        assert chain.native_balance(vault.address) == 1

        chain.mine()
        assert chain.current_height() == height + 5
        chain.withdraw_native(RECIPIENT, vault.address)

        assert chain.native_balance(vault.address) == 0
        assert chain.native_balance(RECIPIENT) == 1
        assert vault.status is VaultStatus.RELEASED

    def test_scenario_c_owner_cannot_withdraw(self, chain: Chain, token_vault) -> None:
        with pytest.raises(UnauthorizedError):
            chain.withdraw_token(OWNER, token_vault.address)
        chain.mine(1000)
        with pytest.raises(UnauthorizedError):
            chain.withdraw_token(OWNER, token_vault.address)
        assert chain.token_balance(TOKEN, token_vault.address) == 1000

    def test_scenario_d_zero_deposits(self, chain: Chain, vault) -> None:
        chain.approve(OWNER, TOKEN, vault.address, 1000)
        with pytest.raises(InvalidAmountError):
            chain.fund_with_token(OWNER, vault.address, TOKEN, 0, 1)
        with pytest.raises(InvalidAmountError):
            chain.fund_with_native(OWNER, vault.address, 0, 1)
        assert vault.funded is False


class TestFundingExactlyOnce:
    def test_no_later_funding_succeeds(self, chain: Chain, native_vault) -> None:
        chain.approve(OWNER, TOKEN, native_vault.address, 10_000)
        for lock in (1, 5, 5000):
            with pytest.raises(AlreadyFundedError):
                chain.fund_with_native(OWNER, native_vault.address, 1, lock)
            with pytest.raises(AlreadyFundedError):
                chain.fund_with_token(OWNER, native_vault.address, TOKEN, 1, lock)
        assert native_vault.amount == 1
        assert chain.native_balance(native_vault.address) == 1

    @pytest.mark.parametrize("caller", [RECIPIENT, OTHER])
    @pytest.mark.parametrize(("amount", "lock"), [(1, 1), (0, 0), (10**6, 10**6)])
    def test_non_owner_always_unauthorized(
        self, chain: Chain, vault, caller: str, amount: int, lock: int
    ) -> None:
        with pytest.raises(UnauthorizedError):
            chain.fund_with_token(caller, vault.address, TOKEN, amount, lock)
        with pytest.raises(UnauthorizedError):
            chain.fund_with_native(caller, vault.address, amount, lock)


class TestAtomicity:
    def test_rejected_native_funding_keeps_value_with_sender(self, chain: Chain, vault) -> None:
        with pytest.raises(InvalidLockDurationError):
            chain.fund_with_native(OWNER, vault.address, 10, 0)
        assert chain.native_balance(OWNER) == 50
        assert chain.native_balance(vault.address) == 0
        assert vault.funded is False

    def test_native_funding_beyond_balance(self, chain: Chain, vault) -> None:
        with pytest.raises(InsufficientBalanceError):
            chain.fund_with_native(OWNER, vault.address, 51, 1)
        assert vault.funded is False
        assert vault.amount == 0
        assert chain.native_balance(OWNER) == 50

    def test_failed_token_funding_keeps_allowance(self, chain: Chain, vault) -> None:
        chain.approve(OWNER, TOKEN, vault.address, 500)
        with pytest.raises(TransferFailedError):
            chain.fund_with_token(OWNER, vault.address, TOKEN, 1000, 1)
        assert chain.assets.token(TOKEN).allowance(OWNER, vault.address) == 500
        assert chain.token_balance(TOKEN, OWNER) == 10_000

    def test_repeat_token_withdrawal_rejected(self, chain: Chain, token_vault) -> None:
        chain.mine(5)
        chain.withdraw_token(RECIPIENT, token_vault.address)
        with pytest.raises(TransferFailedError):
            chain.withdraw_token(RECIPIENT, token_vault.address)
        assert chain.token_balance(TOKEN, RECIPIENT) == 1000

    def test_repeat_native_withdrawal_is_noop(self, chain: Chain, native_vault) -> None:
        chain.mine(5)
        chain.withdraw_native(RECIPIENT, native_vault.address)
        receipt = chain.withdraw_native(RECIPIENT, native_vault.address)
        assert receipt.success is True
        assert receipt.events[0].data["amount"] == 0
        assert chain.native_balance(RECIPIENT) == 1


class TestExtraneousValue:
    def test_native_withdrawal_includes_direct_sends(self, chain: Chain, native_vault) -> None:
        chain.send_native(OWNER, native_vault.address, 4)
        chain.mine(5)
        receipt = chain.withdraw_native(RECIPIENT, native_vault.address)
        assert receipt.events[0].data["amount"] == 5
        assert chain.native_balance(RECIPIENT) == 5
        assert native_vault.amount == 1


class TestReceiptsAndEvents:
    def test_failed_transaction_recorded(self, chain: Chain, vault) -> None:
        with pytest.raises(UnauthorizedError):
            chain.fund_with_native(OTHER, vault.address, 1, 1)
        receipt = chain.receipts[-1]
        assert receipt.success is False
        assert receipt.method == "fund_with_native"
        assert receipt.sender == OTHER
        assert receipt.error_code == "UNAUTHORIZED"
        assert receipt.events == ()

    def test_event_trail(self, chain: Chain, native_vault) -> None:
        chain.mine(5)
        chain.withdraw_native(RECIPIENT, native_vault.address)
        events = chain.events_for(native_vault.address)
        assert [e.event_type for e in events] == [
            EventType.VAULT_CREATED,
            EventType.VAULT_FUNDED,
            EventType.VAULT_WITHDRAWN,
        ]
        assert events[0].data["recipient"] == RECIPIENT
        assert events[1].data["amount"] == 1

    def test_rejections_do_not_appear_in_trail(self, chain: Chain, native_vault) -> None:
        with pytest.raises(LockNotExpiredError):
            chain.withdraw_native(RECIPIENT, native_vault.address)
        assert [e.event_type for e in chain.events_for(native_vault.address)] == [
            EventType.VAULT_CREATED,
            EventType.VAULT_FUNDED,
        ]

    def test_receipt_to_dict(self, chain: Chain, native_vault) -> None:
        data = chain.receipts[-1].to_dict()
        assert data["method"] == "fund_with_native"
        assert data["events"][0]["event_type"] == "VAULT_FUNDED"


class TestDeployment:
    def test_addresses_are_deterministic_and_distinct(self) -> None:
        first, second = Chain(), Chain()
        a1 = first.deploy_vault(OWNER, RECIPIENT)
        a2 = first.deploy_vault(OWNER, RECIPIENT)
        b1 = second.deploy_vault(OWNER, RECIPIENT)
        assert a1.address == b1.address
        assert a1.address != a2.address
        assert a1.address.startswith("0x")
        assert len(a1.address) == 42

    def test_default_and_custom_max_lock(self) -> None:
        chain = Chain(default_max_lock_duration=20)
        assert chain.deploy_vault(OWNER, RECIPIENT).max_lock_duration == 20
        assert chain.deploy_vault(OWNER, RECIPIENT, 7).max_lock_duration == 7

    def test_invalid_max_lock_does_not_deploy(self) -> None:
        chain = Chain()
        with pytest.raises(ValueError):
            chain.deploy_vault(OWNER, RECIPIENT, 0)
        assert chain.vaults() == []
        assert chain.receipts == []

    def test_unknown_vault(self, chain: Chain) -> None:
        with pytest.raises(VaultNotFoundError):
            chain.get_vault("0x" + "f" * 40)
        with pytest.raises(VaultNotFoundError):
            chain.withdraw_native(RECIPIENT, "0x" + "f" * 40)


class TestHeight:
    def test_mine(self) -> None:
        chain = Chain(start_height=3)
        assert chain.mine() == 4
        assert chain.mine(10) == 14

    def test_mine_requires_positive_blocks(self) -> None:
        with pytest.raises(ValueError):
            Chain().mine(0)

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValueError):
            Chain(start_height=-1)

    def test_auto_mine_only_on_success(self) -> None:
        chain = Chain(auto_mine=True)
        chain.faucet(OWNER, 5)
        vault = chain.deploy_vault(OWNER, RECIPIENT)
        assert chain.current_height() == 1

        chain.fund_with_native(OWNER, vault.address, 1, 1)
        assert vault.unlock_height == 2
        assert chain.current_height() == 2

        with pytest.raises(UnauthorizedError):
            chain.withdraw_native(OWNER, vault.address)
        assert chain.current_height() == 2

        chain.withdraw_native(RECIPIENT, vault.address)
        assert chain.native_balance(RECIPIENT) == 1

    def test_from_settings(self) -> None:
        settings = Settings(
            chain_start_height=42,
            chain_auto_mine=True,
            default_max_lock_duration=9,
            _env_file=None,
        )
        chain = Chain.from_settings(settings)
        assert chain.current_height() == 42
        assert chain.deploy_vault(OWNER, RECIPIENT).max_lock_duration == 9
        assert chain.current_height() == 43


class TestTransactionLogging:
    @pytest.fixture
    def log_output(self):
        capture = LogCapture()
        structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
        yield capture
        structlog.reset_defaults()

    def test_revert_carries_transaction_fields(
        self, chain: Chain, vault, log_output: LogCapture
    ) -> None:
        tx_index = len(chain.receipts)
        with pytest.raises(UnauthorizedError):
            chain.fund_with_native(OTHER, vault.address, 1, 1)

        [entry] = [e for e in log_output.entries if e["event"] == "chain.tx_reverted"]
        assert entry["tx_index"] == tx_index
        assert entry["method"] == "fund_with_native"
        assert entry["sender"] == OTHER
        assert entry["vault"] == vault.address
        assert entry["code"] == "UNAUTHORIZED"

    def test_ledger_entries_inherit_transaction(
        self, chain: Chain, log_output: LogCapture
    ) -> None:
        chain.send_native(OWNER, RECIPIENT, 3)

        [entry] = [e for e in log_output.entries if e["event"] == "ledger.transfer"]
        assert entry["method"] == "send_native"
        assert entry["sender"] == OWNER
        assert "vault" not in entry

    def test_context_cleared_after_transaction(self, chain: Chain, native_vault) -> None:
        context = structlog.contextvars.get_contextvars()
        assert "tx_index" not in context
        assert "vault" not in context
