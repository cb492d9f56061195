"""
app/flow/handlers/description.py

Handles: Wizard page 5 – description and submission

- Any text while parked in DESCRIBE becomes the description
- Writes the record and clears the conversation state
"""

from datetime import datetime
from typing import Optional

from app.flow.transitions import Transition, DeleteState
from app.models.record import Record
from app.models.user_state import UserState
from utils.constants import (
    MESSAGE_REPORT_COMPLETED,
    NO_ITEMS_SENTINEL,
    UNKNOWN_LOCATION,
    UNKNOWN_DATE,
)
from utils.line_utils import create_text_message
from app.core.logging import get_logger

logger = get_logger(__name__)


def handle_description(
    user_id: str,
    state: UserState,
    text: str,
    now: Optional[datetime] = None
) -> Transition:
    """
    Builds the final record from the stored state plus the description.

    Args:
        user_id: LINE user ID
        state: State parked at DESCRIBE
        text: Trimmed message text
        now: Submission timestamp (UTC)
    """
    record = Record(
        user_id=user_id,
        location=state.location or UNKNOWN_LOCATION,
        date=state.date or UNKNOWN_DATE,
        category=state.category or "",
        items=state.final_items or NO_ITEMS_SENTINEL,
        description=text,
        created_at=now or datetime.utcnow(),
    )

    logger.info("Description received, submitting record")
    return Transition.reply(
        create_text_message(MESSAGE_REPORT_COMPLETED),
        state_op=DeleteState(),
        record=record,
    )
