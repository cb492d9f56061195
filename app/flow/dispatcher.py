"""
app/flow/dispatcher.py

Purpose: Batch dispatcher

- Receives the normalized events of one webhook request
- Events of the same user run sequentially, in arrival order
- Different users run concurrently
- One event's failure never aborts its siblings
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Sequence

from app.flow.engine import ConversationEngine
from app.flow.events import InboundEvent
from app.core.logging import get_logger, LogContext

logger = get_logger(__name__)


@dataclass
class DispatchResult:
    processed: int = 0
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


def group_by_user(events: Sequence[InboundEvent]) -> Dict[str, List[InboundEvent]]:
    """
    Groups events per user, keeping arrival order inside each group and
    first-seen order between groups.
    """
    groups: Dict[str, List[InboundEvent]] = {}
    for event in events:
        groups.setdefault(event.user_id, []).append(event)
    return groups


class EventDispatcher:
    """Runs a batch of events through the conversation engine."""

    def __init__(self, engine: ConversationEngine):
        self.engine = engine

    async def dispatch(self, events: Sequence[InboundEvent]) -> DispatchResult:
        """
        Processes every event of the batch.

        Returns:
            Counts of processed and failed events
        """
        if not events:
            return DispatchResult()

        groups = group_by_user(events)
        logger.info(f"📨 Dispatching {len(events)} event(s) from {len(groups)} user(s)")

        outcomes = await asyncio.gather(
            *(self._dispatch_user(user_events) for user_events in groups.values())
        )

        result = DispatchResult()
        for outcome in outcomes:
            result.processed += outcome.processed
            result.failed += outcome.failed

        if result.failed:
            logger.warning(f"⚠️ {result.failed} of {len(events)} event(s) failed")
        return result

    async def _dispatch_user(self, events: List[InboundEvent]) -> DispatchResult:
        result = DispatchResult()
        for event in events:
            try:
                await self.engine.handle(event)
                result.processed += 1
            except Exception as e:
                # Already applied writes are kept; continue with the next event
                result.failed += 1
                with LogContext(user_id=event.user_id, event=event.kind):
                    logger.error(f"❌ Event handling failed: {e}", exc_info=True)
        return result
