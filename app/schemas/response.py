"""
app/schemas/response.py

Purpose: Response bodies shared by the API

- ErrorResponse for every handled failure
- WebhookAck for a fully processed webhook batch
"""

from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class WebhookAck(BaseModel):
    """Returned when every event of the batch was handled."""
    status: str = "ok"
    processed: int = 0
