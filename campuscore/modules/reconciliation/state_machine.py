"""
State Machine for Mutations

Provides predictable, debuggable state transitions for one user-initiated
add, edit or delete:

    IDLE → VALIDATING → SUBMITTING → RECONCILING → IDLE
                ↓              ↓
               IDLE          FAILED → IDLE

A controller is busy whenever its machine is outside IDLE.
All transitions are logged for debugging.
"""

from typing import Dict, Optional, Set
from enum import Enum

from campuscore.core.logging_config import logger


class MutationState(str, Enum):
    """Mutation workflow states"""
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    RECONCILING = "reconciling"
    FAILED = "failed"


MUTATION_TRANSITIONS: Dict[MutationState, Set[MutationState]] = {
    MutationState.IDLE: {MutationState.VALIDATING},
    MutationState.VALIDATING: {MutationState.SUBMITTING, MutationState.IDLE},
    MutationState.SUBMITTING: {MutationState.RECONCILING, MutationState.FAILED},
    MutationState.RECONCILING: {MutationState.IDLE},
    MutationState.FAILED: {MutationState.IDLE},
}


class StateMachine:
    """Generic state machine that validates transitions against a table"""

    def __init__(
        self,
        name: str,
        initial_state: Enum,
        transitions: Dict[Enum, Set[Enum]],
    ):
        self.name = name
        self._state = initial_state
        self._transitions = transitions

    @property
    def state(self) -> Enum:
        """Get current state"""
        return self._state

    def can_transition(self, to_state: Enum) -> bool:
        """Check if transition is valid"""
        return to_state in self._transitions.get(self._state, set())

    def transition(
        self,
        to_state: Enum,
        reason: Optional[str] = None,
        force: bool = False
    ) -> bool:
        """
        Transition to new state.

        Args:
            to_state: Target state
            reason: Why the transition is happening
            force: Skip validation

        Returns:
            True if transition succeeded
        """
        if not force and not self.can_transition(to_state):
            allowed = self._transitions.get(self._state, set())
            logger.warning(
                f"[{self.name}] Invalid transition: {self._state.value} → {to_state.value}. "
                f"Allowed: {[s.value for s in allowed]}"
            )
            return False

        old_state = self._state
        self._state = to_state

        logger.debug(
            f"[{self.name}] State transition: {old_state.value} → {to_state.value}"
            + (f" ({reason})" if reason else "")
        )

        return True


class MutationStateMachine(StateMachine):
    """Specialized state machine for a single mutation controller"""

    def __init__(self, entity: str):
        super().__init__(
            name=f"Mutation:{entity}",
            initial_state=MutationState.IDLE,
            transitions=MUTATION_TRANSITIONS
        )
        self.entity = entity

    @property
    def is_idle(self) -> bool:
        return self._state is MutationState.IDLE

    def validate(self, action: str) -> bool:
        return self.transition(
            MutationState.VALIDATING,
            reason=f"{action} requested"
        )

    def submit(self) -> bool:
        return self.transition(
            MutationState.SUBMITTING,
            reason="Validation passed"
        )

    def reconcile(self, outcome: str) -> bool:
        return self.transition(
            MutationState.RECONCILING,
            reason=f"Service returned {outcome}"
        )

    def fail(self, error: str) -> bool:
        return self.transition(
            MutationState.FAILED,
            reason=f"Failed: {error}"
        )

    def settle(self, reason: Optional[str] = None) -> bool:
        """Return to IDLE from any terminal step"""
        return self.transition(MutationState.IDLE, reason=reason)

    def abort(self, reason: str) -> bool:
        """Force back to IDLE after an unexpected error"""
        return self.transition(MutationState.IDLE, reason=reason, force=True)
