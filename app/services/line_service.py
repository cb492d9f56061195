"""
app/services/line_service.py

Purpose: LINE reply sending

- Sends reply messages through the LINE Messaging API reply endpoint
- One reply token answers one inbound event
- Bounded timeout; failures surface as ReplyError
"""

import httpx
from typing import Dict, Any, List, Optional, Protocol

from app.core.exceptions import ReplyError
from app.core.logging import get_logger
from utils.line_utils import MAX_MESSAGES_PER_REPLY

logger = get_logger(__name__)

REPLY_PATH = "/v2/bot/message/reply"


class Replier(Protocol):
    """Sends reply messages addressed by a reply token."""

    async def reply(self, reply_token: str, messages: List[Dict[str, Any]]) -> None:
        ...


class LineReplyService:
    """Service for replying to LINE events"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: Optional[str],
        base_url: str = "https://api.line.me",
        timeout: float = 10.0
    ):
        self.client = client
        self.access_token = access_token
        self.url = f"{base_url.rstrip('/')}{REPLY_PATH}"
        self.timeout = timeout

    def is_configured(self) -> bool:
        """Check if a channel access token is available"""
        return bool(self.access_token)

    async def reply(self, reply_token: str, messages: List[Dict[str, Any]]) -> None:
        """
        Sends up to five messages as the reply to one event.

        Args:
            reply_token: Token from the inbound event
            messages: Message payloads (text, flex)

        Raises:
            ReplyError: On a non-2xx answer, timeout or network failure
        """
        if not messages:
            return

        if len(messages) > MAX_MESSAGES_PER_REPLY:
            logger.warning(f"Dropping {len(messages) - MAX_MESSAGES_PER_REPLY} messages over the reply limit")
            messages = messages[:MAX_MESSAGES_PER_REPLY]

        if not self.is_configured():
            raise ReplyError("LINE channel access token is not configured")

        payload = {"replyToken": reply_token, "messages": messages}
        headers = {"Authorization": f"Bearer {self.access_token}"}

        logger.info(f"📤 Sending reply ({', '.join(m.get('type', '?') for m in messages)})")

        try:
            response = await self.client.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.error("LINE reply API timeout")
            raise ReplyError("LINE reply API timeout") from e
        except httpx.RequestError as e:
            logger.error(f"Network error sending reply: {e}")
            raise ReplyError("Unable to reach LINE reply API", details={"error": str(e)}) from e

        if response.status_code != 200:
            logger.error(f"❌ LINE API error: {response.status_code} - {response.text}")
            raise ReplyError(
                f"LINE API error: {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:500]}
            )

        logger.info("✅ Reply sent")
