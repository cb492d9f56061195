import asyncio

import pytest

from conftest import text_event
from app.flow.dispatcher import EventDispatcher, group_by_user


class RecordingEngine:
    """Stands in for ConversationEngine; fails on texts starting with 'fail'."""

    def __init__(self):
        self.handled = []

    async def handle(self, inbound):
        # yield so users can interleave
        await asyncio.sleep(0)
        self.handled.append((inbound.user_id, inbound.event.text))
        if inbound.event.text.startswith("fail"):
            raise RuntimeError("boom")


def test_group_by_user_keeps_order():
    events = [text_event("1", user_id="Ua"), text_event("2", user_id="Ub"), text_event("3", user_id="Ua")]

    groups = group_by_user(events)

    assert list(groups) == ["Ua", "Ub"]
    assert [e.event.text for e in groups["Ua"]] == ["1", "3"]


@pytest.mark.asyncio
async def test_events_of_one_user_run_in_order():
    engine = RecordingEngine()
    events = [text_event(str(i), user_id="Ua") for i in range(5)] + [text_event("x", user_id="Ub")]

    result = await EventDispatcher(engine).dispatch(events)

    assert result.ok
    assert result.processed == 6
    assert [text for user, text in engine.handled if user == "Ua"] == ["0", "1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_failure_does_not_abort_siblings():
    engine = RecordingEngine()
    events = [
        text_event("fail-1", user_id="Ua"),
        text_event("after", user_id="Ua"),
        text_event("other", user_id="Ub"),
    ]

    result = await EventDispatcher(engine).dispatch(events)

    assert not result.ok
    assert (result.processed, result.failed) == (2, 1)
    assert ("Ua", "after") in engine.handled
    assert ("Ub", "other") in engine.handled


@pytest.mark.asyncio
async def test_empty_batch():
    result = await EventDispatcher(RecordingEngine()).dispatch([])

    assert result.ok
    assert result.processed == 0
