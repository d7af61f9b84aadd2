"""Tests for the shared role check."""

from __future__ import annotations

import pytest

from timelock_vault.domain.access import OWNER, RECIPIENT, require_role
from timelock_vault.domain.exceptions import UnauthorizedError

ALICE = "0x" + "1" * 40
BOB = "0x" + "2" * 40


class TestRequireRole:
    def test_matching_caller_passes(self) -> None:
        require_role(ALICE, ALICE, OWNER)

    def test_other_caller_rejected(self) -> None:
        with pytest.raises(UnauthorizedError) as exc_info:
            require_role(BOB, ALICE, OWNER)
        assert exc_info.value.code == "UNAUTHORIZED"
        assert exc_info.value.caller == BOB
        assert exc_info.value.role == "owner"

    def test_message_names_the_role(self) -> None:
        with pytest.raises(UnauthorizedError, match="Only the recipient"):
            require_role(ALICE, BOB, RECIPIENT)

    def test_comparison_is_exact(self) -> None:
        with pytest.raises(UnauthorizedError):
            require_role(ALICE.upper(), ALICE, OWNER)
