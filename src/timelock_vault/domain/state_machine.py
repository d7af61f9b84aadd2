"""Vault State Machine Guard.

Uses python-statemachine to enforce legal state transitions at the domain level.
No matter what the API or the environment does, an illegal transition
(e.g., UNFUNDED -> RELEASED) raises TransitionNotAllowed.

The state machine is instantiated per-operation from the record's status and
validates the transition before the record is updated.

Transition table:
    UNFUNDED  -> FUNDED     (fund)
    FUNDED    -> RELEASED   (withdraw)
    RELEASED  -> RELEASED   (withdraw, repeat withdrawal of an emptied vault)
"""

from __future__ import annotations

from statemachine import State, StateMachine

EVENT_NAMES = ("fund", "withdraw")


class VaultStateMachine(StateMachine):
    """State machine that guards the vault lifecycle.

    Usage:
        sm = VaultStateMachine(current_status="FUNDED")
        sm.withdraw()  # transitions to RELEASED
        sm.status      # "RELEASED"
    """

    # --- States ---
    UNFUNDED = State("UNFUNDED", initial=True)
    FUNDED = State("FUNDED")
    RELEASED = State("RELEASED")

    # --- Events / Transitions ---
    fund = UNFUNDED.to(FUNDED)
    withdraw = FUNDED.to(RELEASED) | RELEASED.to.itself()

    def __init__(self, current_status: str = "UNFUNDED") -> None:
        """Initialize the state machine at a given status.

        Args:
            current_status: The current VaultStatus value (e.g., "FUNDED").
        """
        valid_values = {s.value for s in self.states}
        if current_status not in valid_values:
            valid = ", ".join(sorted(valid_values))
            raise ValueError(
                f"Unknown status '{current_status}'. Valid states: {valid}"
            )
        super().__init__(start_value=current_status)

    @property
    def status(self) -> str:
        """Return the current state value as a string (matches VaultStatus enum)."""
        return str(self.current_state_value)

    def get_allowed_events(self) -> list[str]:
        """Return a list of event names that can fire from the current state."""
        return [event.id for event in self.allowed_events]


def validate_transition(current_status: str, event_name: str) -> str:
    """Validate a state transition and return the new status.

    Args:
        current_status: Current VaultStatus value.
        event_name: The event to fire ("fund" or "withdraw").

    Returns:
        The new status string after the transition.

    Raises:
        TransitionNotAllowed: If the transition is illegal.
        ValueError: If the status or event name is invalid.
    """
    sm = VaultStateMachine(current_status=current_status)

    event_method = getattr(sm, event_name, None) if event_name in EVENT_NAMES else None
    if event_method is None:
        raise ValueError(
            f"Unknown event '{event_name}'. "
            f"Allowed events from {current_status}: {sm.get_allowed_events()}"
        )

    event_method()
    return sm.status
