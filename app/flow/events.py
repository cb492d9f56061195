"""
app/flow/events.py

Purpose: Inbound event types consumed by the conversation engine

- ButtonAction: a postback tap, already decoded into a payload dict
- TextMessage: a trimmed text message
- InboundEvent: one of the above addressed to a user with a reply handle
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


class ActionKind(str, Enum):
    SELECT_LOCATION = "select_loc"
    SET_DATE = "set_date"
    SELECT_CATEGORY = "select_cat"
    TOGGLE_ITEM = "toggle_item"
    CONFIRM_ITEMS = "confirm_items"

    @classmethod
    def from_action(cls, action: Optional[str]) -> Optional["ActionKind"]:
        """Returns None for a missing or unknown action."""
        try:
            return cls(action)
        except ValueError:
            return None


@dataclass(frozen=True)
class ButtonAction:
    kind: ActionKind
    payload: Dict[str, str] = field(default_factory=dict)
    # Structured values from native inputs (e.g. {"date": "2024-01-01"})
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def val(self) -> Optional[str]:
        return self.payload.get("val") or None


@dataclass(frozen=True)
class TextMessage:
    text: str


Event = Union[ButtonAction, TextMessage]


@dataclass(frozen=True)
class InboundEvent:
    user_id: str
    reply_token: str
    event: Event

    @property
    def kind(self) -> str:
        if isinstance(self.event, ButtonAction):
            return self.event.kind.value
        return "text"
