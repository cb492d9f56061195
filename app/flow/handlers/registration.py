"""
app/flow/handlers/registration.py

Handles: Registration

- "青年會資訊註冊" trigger: instructions, or a notice if already registered
- Registration input "ministry sutra_name name" while parked in REGISTERING
- Creates the profile and clears the conversation state
"""

from datetime import datetime
from typing import Optional

from app.flow.states import Step
from app.flow.transitions import Transition, ReplaceState, DeleteState
from app.models.user import UserProfile
from app.models.user_state import UserState
from utils.constants import (
    MESSAGE_ALREADY_REGISTERED,
    MESSAGE_REGISTRATION_INSTRUCTIONS,
    MESSAGE_REGISTRATION_SUCCESS,
    MESSAGE_REGISTRATION_FORMAT_ERROR,
)
from utils.line_utils import create_text_message
from utils.validation_utils import parse_registration_text
from app.core.logging import get_logger

logger = get_logger(__name__)


def handle_register_command(is_registered: bool) -> Transition:
    """
    Starts registration unless the user already has a profile.

    Args:
        is_registered: Whether a profile exists for the user
    """
    if is_registered:
        logger.info("Registration requested by an already registered user")
        return Transition.reply(create_text_message(MESSAGE_ALREADY_REGISTERED))

    logger.info("Starting registration")
    return Transition.reply(
        create_text_message(MESSAGE_REGISTRATION_INSTRUCTIONS),
        state_op=ReplaceState(UserState(step=Step.REGISTERING)),
    )


def handle_registration_input(
    user_id: str,
    text: str,
    now: Optional[datetime] = None
) -> Transition:
    """
    Handles the registration details typed by the user.

    Exactly three whitespace separated tokens create the profile and end the
    conversation; anything else re-prompts and leaves the state untouched.

    Args:
        user_id: LINE user ID
        text: Trimmed message text
        now: Registration timestamp (UTC)
    """
    parsed = parse_registration_text(text)

    if parsed is None:
        logger.warning(f"Invalid registration input ({len(text.split())} tokens)")
        return Transition.reply(create_text_message(MESSAGE_REGISTRATION_FORMAT_ERROR))

    ministry, sutra_name, name = parsed
    profile = UserProfile(
        user_id=user_id,
        ministry=ministry,
        sutra_name=sutra_name,
        name=name,
        registered_at=now or datetime.utcnow(),
    )

    logger.info("Registration details accepted")
    return Transition.reply(
        create_text_message(MESSAGE_REGISTRATION_SUCCESS.format(name=name)),
        state_op=DeleteState(),
        profile=profile,
    )
