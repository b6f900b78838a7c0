"""
Domain exceptions.

Typed exceptions raised by entities, ports and adapters. Orchestrators
convert them into failure outcomes at their boundary.
"""

from __future__ import annotations

from typing import Optional


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class DomainError(Exception):
    """
    Base exception for all domain errors.

    Allows catching every SkinWise error with a single except clause.
    """

    pass


# ═══════════════════════════════════════════════════════════
# VALIDATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ValidationError(DomainError):
    """
    Input validation failed.

    Raised when:
    - Empty user id or question
    - Malformed data URI
    - Missing required fields

    Example:
        >>> raise ValidationError("Question cannot be empty")
    """

    pass


class ImageTooLargeError(ValidationError):
    """
    Image payload exceeds the configured ceiling.

    Example:
        >>> raise ImageTooLargeError(size_bytes=20_000_000, limit_bytes=16_777_216)
    """

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Image size {size_bytes} bytes exceeds the {limit_bytes} bytes limit"
        )


class UnsupportedImageTypeError(ValidationError):
    """
    Image MIME type is not an accepted raster format.

    Example:
        >>> raise UnsupportedImageTypeError("application/pdf")
    """

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported image type: {mime_type}")


# ═══════════════════════════════════════════════════════════
# ENTITLEMENT EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class EntitlementError(DomainError):
    """Base exception for entitlement domain."""

    pass


class ProfileNotFoundError(EntitlementError):
    """
    Metering profile does not exist.

    Example:
        >>> raise ProfileNotFoundError("user_123")
    """

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile not found: {user_id}")


# ═══════════════════════════════════════════════════════════
# CONVERSATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ConversationBusyError(DomainError):
    """
    A follow-up request is already outstanding for this conversation.

    Turns are strictly sequential; the caller must wait for the pending
    reply before submitting the next question.
    """

    pass


# ═══════════════════════════════════════════════════════════
# EXTERNAL SERVICE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ExternalServiceError(DomainError):
    """
    External service call failed.

    Base class for all external service errors.
    """

    pass


class InferenceError(ExternalServiceError):
    """
    Inference gateway call failed.

    Raised when:
    - Model API call fails after retries
    - Network error
    - Circuit breaker open

    Example:
        >>> raise InferenceError("classify", "OpenAI API failed: 503")
    """

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {message}")


class InferenceTimeoutError(InferenceError):
    """
    Inference call exceeded its deadline.

    Example:
        >>> raise InferenceTimeoutError("assess_severity", 60.0)
    """

    def __init__(self, operation: str, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(operation, f"timed out after {timeout_s:g}s")


class SchemaValidationError(InferenceError):
    """
    Structured output did not match the expected schema.

    Raised when:
    - Parsed response is empty
    - Required field missing or blank
    - Value outside the closed set (e.g. unknown severity)

    Example:
        >>> raise SchemaValidationError("classify", "empty condition label")
    """

    pass


# ═══════════════════════════════════════════════════════════
# INFRASTRUCTURE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class InfrastructureError(DomainError):
    """
    Infrastructure layer error.

    Base class for database errors.
    """

    pass


class DatabaseError(InfrastructureError):
    """
    Database operation failed.

    Raised when:
    - Connection lost
    - Write rejected

    Example:
        >>> raise DatabaseError("MongoDB connection lost")
    """

    pass
