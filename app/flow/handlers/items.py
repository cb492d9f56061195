"""
app/flow/handlers/items.py

Handles: Wizard page 4 – multi-select items

- Toggle an item in/out of the selection (by value, order preserved)
- Confirm the selection and move to the description step
- Taps on a stale card (no stored state) get a timeout notice
"""

from typing import List, Optional, Sequence

from app.flow.events import ButtonAction
from app.flow.menus import build_item_menu
from app.flow.states import Step
from app.flow.transitions import Transition, MergeState
from app.models.user_state import UserState
from utils.constants import (
    MESSAGE_SESSION_TIMEOUT,
    MESSAGE_INVALID_SELECTION,
    MESSAGE_ITEMS_RECORDED,
    NO_ITEMS_SENTINEL,
    NO_ITEMS_DISPLAY,
)
from utils.line_utils import create_text_message
from app.core.logging import get_logger

logger = get_logger(__name__)


def toggle_item(items: Sequence[str], item: str) -> List[str]:
    """
    Removes the first entry equal to ``item``, or appends it.

    Returns a new list; untouched entries keep their relative order.
    """
    result = list(items)
    try:
        result.remove(item)
    except ValueError:
        result.append(item)
    return result


def join_items(items: Sequence[str]) -> str:
    """
    Comma-joined snapshot stored as final_items, "none" when empty.
    """
    if not items:
        return NO_ITEMS_SENTINEL
    return ",".join(items)


def display_items(final_items: str) -> str:
    if final_items == NO_ITEMS_SENTINEL:
        return NO_ITEMS_DISPLAY
    return final_items


def _session_timeout() -> Transition:
    logger.info("Item action without stored state, treating as timed out")
    return Transition.reply(create_text_message(MESSAGE_SESSION_TIMEOUT))


def handle_item_toggle(state: Optional[UserState], action: ButtonAction) -> Transition:
    """
    Adds or removes one item and re-renders the card with the new selection.
    """
    if state is None:
        return _session_timeout()

    if state.step != Step.SELECT_ITEMS:
        logger.info(f"Ignoring item toggle at step {state.step.value}")
        return Transition.ignore()

    item = action.val
    if not item:
        logger.warning("Toggle postback without a value")
        return Transition.reply(create_text_message(MESSAGE_INVALID_SELECTION))

    selected = toggle_item(state.temp_items, item)
    logger.info(f"Toggled item '{item}', {len(selected)} selected")

    return Transition.reply(
        build_item_menu(state.category or "", selected),
        state_op=MergeState({"temp_items": selected}),
    )


def handle_items_confirmation(state: Optional[UserState]) -> Transition:
    """
    Freezes the selection and asks for the description.
    """
    if state is None:
        return _session_timeout()

    if state.step != Step.SELECT_ITEMS:
        logger.info(f"Ignoring item confirmation at step {state.step.value}")
        return Transition.ignore()

    final_items = join_items(state.temp_items)
    logger.info(f"Items confirmed: {final_items}")

    return Transition.reply(
        create_text_message(MESSAGE_ITEMS_RECORDED.format(items=display_items(final_items))),
        state_op=MergeState({"step": Step.DESCRIBE, "final_items": final_items}),
    )
