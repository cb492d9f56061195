"""
app/api/webhook.py

Purpose: LINE webhook endpoint

- Receives event batches from the LINE platform
- Validates and normalizes the payload
- Hands the batch to the dispatcher
- Answers with an acknowledgement once every event was attempted
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.flow.dispatcher import EventDispatcher
from app.schemas.response import ErrorResponse, WebhookAck
from app.schemas.webhook import LineWebhookPayload, normalize_events

logger = get_logger(__name__)
router = APIRouter()


def get_dispatcher(request: Request) -> EventDispatcher:
    """Dispatcher built during application startup."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Event dispatcher not initialized. Is the application lifespan running?")
    return dispatcher


@router.post("/webhook", response_model=WebhookAck)
async def webhook_handler(
    request: Request,
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    """
    LINE webhook endpoint.

    Every event of the batch is processed even if some fail; failures are
    logged and reported with a generic error body.
    """
    try:
        body = await request.json()
        payload = LineWebhookPayload.model_validate(body)
    except (ValueError, PydanticValidationError) as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise ValidationError("Invalid webhook payload")

    events = normalize_events(payload)
    logger.info(f"📱 Webhook received: {len(payload.events)} event(s), {len(events)} actionable")

    result = await dispatcher.dispatch(events)

    if not result.ok:
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="One or more events could not be processed",
                code="EVENT_PROCESSING_FAILED",
                details={"processed": result.processed, "failed": result.failed}
            ).model_dump()
        )

    return WebhookAck(processed=result.processed)


@router.get("/webhook")
async def webhook_verification():
    """
    Plain probe used when verifying the webhook URL from a browser.
    """
    return PlainTextResponse("OK")
