from typing import Optional, Any

class ReportBotError(Exception):
    """
    Base exception for the report bot application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(ReportBotError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class StateNotFoundError(ResourceNotFoundError):
    """
    Raised when a partial state update targets a user without a stored state.
    """
    def __init__(self, user_id: str):
        super().__init__(f"No conversation state stored for user {user_id}", details={"user_id": user_id})
        self.code = "STATE_NOT_FOUND"

class ValidationError(ReportBotError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class InvalidTransitionError(ReportBotError):
    """
    Raised when a handler produces a step change the flow does not allow.
    """
    def __init__(self, from_step: Optional[str], to_step: Optional[str]):
        super().__init__(
            f"Invalid step transition: {from_step} -> {to_step}",
            code="INVALID_TRANSITION",
            status_code=500,
            details={"from": from_step, "to": to_step}
        )

class ExternalServiceError(ReportBotError):
    """
    Raised when an external service (e.g., MongoDB, LINE) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class StoreError(ExternalServiceError):
    """
    Raised when a persistence operation fails or exceeds its timeout.
    """
    def __init__(self, message: str = "Store operation failed", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "STORE_ERROR"

class ReplyError(ExternalServiceError):
    """
    Raised when the LINE reply API rejects or does not answer a reply.
    """
    def __init__(self, message: str = "Reply could not be delivered", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "REPLY_ERROR"
