"""
app/flow/transitions.py

Purpose: Result of handling one event

- State operation to apply (keep, replace, merge, delete)
- Optional profile / record to create
- Reply messages to send
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from app.flow.states import Step
from app.models.user_state import UserState
from app.models.user import UserProfile
from app.models.record import Record


@dataclass(frozen=True)
class KeepState:
    pass


@dataclass(frozen=True)
class ReplaceState:
    state: UserState


@dataclass(frozen=True)
class MergeState:
    fields: Dict[str, Any]


@dataclass(frozen=True)
class DeleteState:
    pass


StateOp = Union[KeepState, ReplaceState, MergeState, DeleteState]


@dataclass
class Transition:
    """
    Everything the engine must do for one event, in application order:
    profile, record, state, reply.
    """
    messages: List[Dict[str, Any]] = field(default_factory=list)
    state_op: StateOp = field(default_factory=KeepState)
    profile: Optional[UserProfile] = None
    record: Optional[Record] = None

    @classmethod
    def reply(cls, message: Dict[str, Any], **kwargs) -> "Transition":
        return cls(messages=[message], **kwargs)

    @classmethod
    def ignore(cls) -> "Transition":
        return cls()

    @property
    def is_noop(self) -> bool:
        return (
            not self.messages
            and isinstance(self.state_op, KeepState)
            and self.profile is None
            and self.record is None
        )

    def next_step(self, current: Optional[Step]) -> Optional[Step]:
        """Step the user is left in once the state operation is applied."""
        op = self.state_op
        if isinstance(op, ReplaceState):
            return op.state.step
        if isinstance(op, DeleteState):
            return None
        if isinstance(op, MergeState) and "step" in op.fields:
            return Step.parse(op.fields["step"])
        return current
