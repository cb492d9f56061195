"""
app/schemas/webhook.py

Purpose: LINE webhook payload schemas and parsers

- Validates incoming webhook bodies
- Normalizes postback and text-message events into InboundEvent
- Skips event types the bot does not react to
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from app.flow.events import ActionKind, ButtonAction, InboundEvent, TextMessage
from app.core.logging import get_logger
from utils.line_utils import parse_postback_data
from utils.validation_utils import sanitize_text

logger = get_logger(__name__)


class LineSource(BaseModel):
    type: str = "user"
    user_id: Optional[str] = Field(default=None, alias="userId")

    class Config:
        populate_by_name = True
        extra = "allow"


class LinePostback(BaseModel):
    data: str = ""
    # Present for datetimepicker actions, e.g. {"date": "2024-01-01"}
    params: Optional[Dict[str, str]] = None

    class Config:
        extra = "allow"


class LineMessage(BaseModel):
    type: str
    id: Optional[str] = None
    text: Optional[str] = None

    class Config:
        extra = "allow"


class LineEvent(BaseModel):
    type: str
    reply_token: Optional[str] = Field(default=None, alias="replyToken")
    source: Optional[LineSource] = None
    timestamp: Optional[int] = None
    postback: Optional[LinePostback] = None
    message: Optional[LineMessage] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @property
    def user_id(self) -> Optional[str]:
        return self.source.user_id if self.source else None


class LineWebhookPayload(BaseModel):
    """
    Body LINE posts to the webhook.

    Example:
        {
            "destination": "U0123...",
            "events": [
                {
                    "type": "postback",
                    "replyToken": "b60d4...",
                    "source": {"type": "user", "userId": "U4af4..."},
                    "postback": {"data": "action=toggle_item&val=%E5%BA%A6%E7%9C%BE"}
                }
            ]
        }
    """
    destination: Optional[str] = None
    events: List[LineEvent] = Field(default_factory=list)


def normalize_event(event: LineEvent) -> Optional[InboundEvent]:
    """
    Converts one LINE event to an InboundEvent.

    Returns None for events the bot ignores (follow, stickers, unknown
    postback actions, events without user or reply token).
    """
    user_id = event.user_id
    if not user_id or not event.reply_token:
        logger.debug(f"Skipping {event.type} event without user or reply token")
        return None

    if event.type == "postback" and event.postback is not None:
        payload = parse_postback_data(event.postback.data)
        kind = ActionKind.from_action(payload.get("action"))
        if kind is None:
            logger.info(f"Skipping postback with unknown action: {payload.get('action')!r}")
            return None
        return InboundEvent(
            user_id=user_id,
            reply_token=event.reply_token,
            event=ButtonAction(kind=kind, payload=payload, params=dict(event.postback.params or {})),
        )

    if event.type == "message" and event.message is not None and event.message.type == "text":
        return InboundEvent(
            user_id=user_id,
            reply_token=event.reply_token,
            event=TextMessage(text=sanitize_text(event.message.text)),
        )

    logger.debug(f"Skipping unsupported event type: {event.type}")
    return None


def normalize_events(payload: LineWebhookPayload) -> List[InboundEvent]:
    """
    Normalizes all events of a webhook body, preserving order.
    """
    normalized = []
    for event in payload.events:
        inbound = normalize_event(event)
        if inbound is not None:
            normalized.append(inbound)
    return normalized
