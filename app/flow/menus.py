"""
app/flow/menus.py

Purpose: Flex cards for wizard pages 1-4

- Each card has a step header and an ordered list of tappable options
- Every option carries the action query string that comes back as the
  next postback, seeded with the values chosen on earlier pages
- The item card highlights the current selection and ends with a confirm
  button showing how many items are selected
"""

from datetime import datetime
from typing import Any, Dict, List, Sequence

from app.flow.states import get_wizard_page
from utils.constants import (
    ACTION_SELECT_LOCATION,
    ACTION_SET_DATE,
    ACTION_SELECT_CATEGORY,
    ACTION_TOGGLE_ITEM,
    ACTION_CONFIRM_ITEMS,
    LOCATIONS,
    CATEGORIES,
    CATEGORY_EVENTS,
    EVENT_ITEMS,
    PRACTICE_ITEMS,
    COLOR_BRAND,
    COLOR_MUTED,
    SELECTED_PREFIX,
    TODAY_LABEL,
    PICK_OTHER_DATE_LABEL,
    CONFIRM_ITEMS_LABEL,
)
from utils.line_utils import (
    build_postback_data,
    create_bubble,
    create_datetimepicker_button,
    create_flex_message,
    create_header_text,
    create_postback_button,
    create_separator,
)
from utils.time_utils import format_compact_date, format_display_date


def items_for_category(category: str) -> List[str]:
    """
    Options offered on page 4. Anything but the events category falls
    back to the personal practice list.
    """
    if category == CATEGORY_EVENTS:
        return list(EVENT_ITEMS)
    return list(PRACTICE_ITEMS)


def _page_header(name: str) -> List[Dict[str, Any]]:
    return [create_header_text(get_wizard_page(name).header, COLOR_BRAND)]


def build_location_menu() -> Dict[str, Any]:
    """Page 1: one button per location."""
    buttons = [
        create_postback_button(
            label=location,
            data=build_postback_data(ACTION_SELECT_LOCATION, val=location),
            height="sm",
        )
        for location in LOCATIONS
    ]

    page = get_wizard_page("location")
    return create_flex_message(page.alt_text, create_bubble(_page_header("location"), buttons))


def build_date_menu(location: str, today: datetime) -> Dict[str, Any]:
    """
    Page 2: "today" shortcut plus a native date picker.

    Args:
        location: Location chosen on page 1
        today: Current local date
    """
    base = {"loc": location}
    buttons = [
        create_postback_button(
            label=TODAY_LABEL.format(display=format_display_date(today)),
            data=build_postback_data(ACTION_SET_DATE, val=format_compact_date(today), **base),
            style="primary",
            color=COLOR_BRAND,
        ),
        create_datetimepicker_button(
            label=PICK_OTHER_DATE_LABEL,
            data=build_postback_data(ACTION_SET_DATE, **base),
            mode="date",
        ),
    ]

    page = get_wizard_page("date")
    return create_flex_message(page.alt_text, create_bubble(_page_header("date"), buttons, spacing="md"))


def build_category_menu(location: str, date: str) -> Dict[str, Any]:
    """Page 3: one button per category, carrying location and date forward."""
    buttons = [
        create_postback_button(
            label=category,
            data=build_postback_data(ACTION_SELECT_CATEGORY, loc=location, date=date, val=category),
            style="primary",
        )
        for category in CATEGORIES
    ]

    page = get_wizard_page("category")
    return create_flex_message(page.alt_text, create_bubble(_page_header("category"), buttons, spacing="md"))


def build_item_menu(category: str, selected: Sequence[str]) -> Dict[str, Any]:
    """
    Page 4: toggle buttons for the category's items.

    Selected items render as primary buttons with a check mark; the trailing
    confirm button shows the running count.
    """
    chosen = set(selected)
    buttons: List[Dict[str, Any]] = []
    for item in items_for_category(category):
        is_selected = item in chosen
        buttons.append(
            create_postback_button(
                label=f"{SELECTED_PREFIX}{item}" if is_selected else item,
                data=build_postback_data(ACTION_TOGGLE_ITEM, val=item),
                style="primary" if is_selected else "secondary",
                color=COLOR_BRAND if is_selected else COLOR_MUTED,
                height="sm",
            )
        )

    buttons.append(create_separator("md"))
    buttons.append(
        create_postback_button(
            label=CONFIRM_ITEMS_LABEL.format(count=len(selected)),
            data=build_postback_data(ACTION_CONFIRM_ITEMS),
            style="link",
            height="sm",
        )
    )

    header = _page_header("items") + [create_header_text(category, COLOR_MUTED, bold=False, small=True)]
    page = get_wizard_page("items")
    return create_flex_message(page.alt_text, create_bubble(header, buttons))
