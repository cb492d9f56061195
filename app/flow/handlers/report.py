"""
app/flow/handlers/report.py

Handles: Wizard pages 1-3

- "實績回報" trigger: location menu, gated on registration
- Location chosen -> date menu (no state written)
- Date chosen (shortcut value or native picker) -> category menu
- Category chosen -> state created at SELECT_ITEMS, item menu
"""

from datetime import datetime

from app.flow.events import ButtonAction
from app.flow.menus import (
    build_location_menu,
    build_date_menu,
    build_category_menu,
    build_item_menu,
)
from app.flow.states import Step
from app.flow.transitions import Transition, ReplaceState
from app.models.user_state import UserState
from utils.constants import (
    MESSAGE_NOT_REGISTERED,
    MESSAGE_DATE_CAPTURE_FAILED,
    MESSAGE_INVALID_SELECTION,
    UNKNOWN_LOCATION,
    UNKNOWN_DATE,
    UNKNOWN_LOCATION_ON_DATE,
)
from utils.line_utils import create_text_message
from utils.time_utils import normalize_picker_date
from utils.validation_utils import is_compact_date
from app.core.logging import get_logger

logger = get_logger(__name__)


def handle_report_command(is_registered: bool) -> Transition:
    """
    Opens the wizard. Unregistered users are told to register first and no
    state is created either way.
    """
    if not is_registered:
        logger.info("Report requested by unregistered user")
        return Transition.reply(create_text_message(MESSAGE_NOT_REGISTERED))

    return Transition.reply(build_location_menu())


def handle_location_selection(action: ButtonAction, today: datetime) -> Transition:
    """
    Page 1 -> 2. The location travels inside the date menu's postback data.
    """
    location = action.val
    if not location:
        logger.warning("Location postback without a value")
        return Transition.reply(create_text_message(MESSAGE_INVALID_SELECTION))

    return Transition.reply(build_date_menu(location, today))


def resolve_date(action: ButtonAction) -> str:
    """
    Date from the "today" button value, else from the native picker params.

    Returns "" when neither yields a YYYYMMDD date.
    """
    date = action.val or normalize_picker_date(action.params.get("date"))
    return date if is_compact_date(date) else ""


def handle_date_selection(action: ButtonAction) -> Transition:
    """
    Page 2 -> 3.
    """
    date = resolve_date(action)
    if not date:
        logger.warning(f"Could not resolve date from postback (params={action.params})")
        return Transition.reply(create_text_message(MESSAGE_DATE_CAPTURE_FAILED))

    location = action.payload.get("loc") or UNKNOWN_LOCATION_ON_DATE
    return Transition.reply(build_category_menu(location, date))


def handle_category_selection(action: ButtonAction) -> Transition:
    """
    Page 3 -> 4. Overwrites any previous state with a fresh run.
    """
    category = action.val
    if not category:
        logger.warning("Category postback without a value")
        return Transition.reply(create_text_message(MESSAGE_INVALID_SELECTION))

    state = UserState(
        step=Step.SELECT_ITEMS,
        location=action.payload.get("loc") or UNKNOWN_LOCATION,
        date=action.payload.get("date") or UNKNOWN_DATE,
        category=category,
        temp_items=[],
    )

    logger.info(f"Category selected: {category}")
    return Transition.reply(
        build_item_menu(category, []),
        state_op=ReplaceState(state),
    )
