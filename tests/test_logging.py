import asyncio
import json
import logging

import pytest

from app.core.logging import (
    ContextFilter,
    LogContext,
    StructuredFormatter,
    get_log_context,
    get_logger,
)


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.addFilter(ContextFilter())

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    handler = ListHandler()
    logger = get_logger("tests.logging")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield logger, handler
    logger.removeHandler(handler)


def test_context_is_attached_and_restored(captured):
    logger, handler = captured

    with LogContext(user_id="U1", event="text"):
        with LogContext(step="4"):
            logger.info("inner")
        logger.info("outer")
    logger.info("after")

    inner, outer, after = handler.records
    assert (inner.user_id, inner.event, inner.step) == ("U1", "text", "4")
    assert not hasattr(outer, "step")
    assert not hasattr(after, "user_id")
    assert get_log_context() == {}


def test_explicit_extra_wins(captured):
    logger, handler = captured

    with LogContext(user_id="U1"):
        logger.info("explicit", extra={"user_id": "U2"})

    assert handler.records[0].user_id == "U2"


@pytest.mark.asyncio
async def test_context_is_isolated_between_tasks():
    async def handle(user_id):
        with LogContext(user_id=user_id):
            await asyncio.sleep(0)
            return get_log_context()["user_id"]

    assert await asyncio.gather(handle("Ua"), handle("Ub")) == ["Ua", "Ub"]


def test_structured_formatter_includes_context(captured):
    logger, handler = captured

    with LogContext(user_id="U1", step="5"):
        logger.warning("已記錄")

    data = json.loads(StructuredFormatter().format(handler.records[0]))
    assert data["message"] == "已記錄"
    assert data["level"] == "WARNING"
    assert data["user_id"] == "U1"
    assert data["step"] == "5"
