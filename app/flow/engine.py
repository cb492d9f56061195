"""
app/flow/engine.py

Purpose: Conversation engine

- decide(): pure routing of (stored state, event) to a Transition
- ConversationEngine: loads state, decides, applies the transition
  through the injected stores, then sends the reply
"""

from datetime import datetime
from typing import Callable, Optional

from app.core.exceptions import InvalidTransitionError
from app.core.logging import get_logger, LogContext
from app.flow.events import ActionKind, ButtonAction, Event, InboundEvent, TextMessage
from app.flow.handlers.description import handle_description
from app.flow.handlers.items import handle_item_toggle, handle_items_confirmation
from app.flow.handlers.registration import handle_register_command, handle_registration_input
from app.flow.handlers.report import (
    handle_report_command,
    handle_location_selection,
    handle_date_selection,
    handle_category_selection,
)
from app.flow.states import Step, is_valid_transition
from app.flow.transitions import Transition, ReplaceState, MergeState, DeleteState
from app.models.user_state import UserState
from app.services.line_service import Replier
from app.services.record_service import RecordStore
from app.services.session_service import StateStore
from app.services.user_service import ProfileStore
from utils.constants import REGISTER_TRIGGER, REPORT_TRIGGER
from utils.time_utils import local_now

logger = get_logger(__name__)

TRIGGER_PHRASES = (REGISTER_TRIGGER, REPORT_TRIGGER)


def needs_registration_check(event: Event) -> bool:
    """Only the two trigger phrases look at the profile collection."""
    return isinstance(event, TextMessage) and event.text in TRIGGER_PHRASES


def decide(
    user_id: str,
    state: Optional[UserState],
    event: Event,
    now: datetime,
    is_registered: Optional[bool] = None,
    timezone_offset_hours: int = 8
) -> Transition:
    """
    Maps the stored state and one inbound event to a Transition.

    Args:
        user_id: LINE user ID
        state: Stored state, None when the user has none
        event: ButtonAction or TextMessage
        now: Current UTC time
        is_registered: Profile existence; required for trigger phrases
        timezone_offset_hours: Offset used for the date menu's "today"

    Returns:
        Transition (possibly a no-op)
    """
    if isinstance(event, ButtonAction):
        if event.kind == ActionKind.SELECT_LOCATION:
            return handle_location_selection(event, local_now(timezone_offset_hours, now))
        if event.kind == ActionKind.SET_DATE:
            return handle_date_selection(event)
        if event.kind == ActionKind.SELECT_CATEGORY:
            return handle_category_selection(event)
        if event.kind == ActionKind.TOGGLE_ITEM:
            return handle_item_toggle(state, event)
        if event.kind == ActionKind.CONFIRM_ITEMS:
            return handle_items_confirmation(state)
        return Transition.ignore()

    if isinstance(event, TextMessage):
        text = event.text

        if text in TRIGGER_PHRASES:
            if is_registered is None:
                raise ValueError("Registration status is required for trigger phrases")
            if text == REGISTER_TRIGGER:
                return handle_register_command(is_registered)
            return handle_report_command(is_registered)

        if state is None:
            return Transition.ignore()
        if state.step == Step.REGISTERING:
            return handle_registration_input(user_id, text, now)
        if state.step == Step.DESCRIBE:
            return handle_description(user_id, state, text, now)

    return Transition.ignore()


class ConversationEngine:
    """
    Handles one inbound event end to end.

    Collaborators are injected so the engine can run against Mongo and the
    LINE API in production and against in-memory fakes in tests.
    """

    def __init__(
        self,
        states: StateStore,
        profiles: ProfileStore,
        records: RecordStore,
        replier: Replier,
        timezone_offset_hours: int = 8,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.states = states
        self.profiles = profiles
        self.records = records
        self.replier = replier
        self.timezone_offset_hours = timezone_offset_hours
        self.clock = clock

    async def handle(self, inbound: InboundEvent) -> Transition:
        """
        Load state -> decide -> write -> reply.

        Store and reply failures propagate to the caller.
        """
        user_id = inbound.user_id

        with LogContext(user_id=user_id, event=inbound.kind):
            state = await self.states.get(user_id)
            current = state.step if state else None

            is_registered = None
            if needs_registration_check(inbound.event):
                is_registered = await self.profiles.exists(user_id)

            with LogContext(step=current.value if current else "none"):
                transition = decide(
                    user_id,
                    state,
                    inbound.event,
                    now=self.clock(),
                    is_registered=is_registered,
                    timezone_offset_hours=self.timezone_offset_hours,
                )

                if transition.is_noop:
                    logger.debug("Event ignored in current step")
                    return transition

                await self.apply(user_id, current, transition)

                if transition.messages:
                    await self.replier.reply(inbound.reply_token, transition.messages)

            return transition

    async def apply(self, user_id: str, current: Optional[Step], transition: Transition) -> None:
        """
        Writes profile, record and state for a transition, in that order.

        Raises:
            InvalidTransitionError: If the resulting step is not reachable
                from the current one
        """
        next_step = transition.next_step(current)
        if not is_valid_transition(current, next_step):
            raise InvalidTransitionError(
                current.value if current else None,
                next_step.value if next_step else None,
            )

        if transition.profile is not None:
            await self.profiles.create(transition.profile)

        if transition.record is not None:
            await self.records.add(transition.record)

        op = transition.state_op
        if isinstance(op, ReplaceState):
            await self.states.set(user_id, op.state)
        elif isinstance(op, MergeState):
            await self.states.merge(user_id, op.fields)
        elif isinstance(op, DeleteState):
            await self.states.delete(user_id)

        if next_step != current:
            logger.info(
                f"Step changed: {current.value if current else 'none'} -> "
                f"{next_step.value if next_step else 'none'}"
            )
