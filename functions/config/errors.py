"""BlockPlane error handling.

Custom exceptions and error codes for the materials scoring backend.

Missing or non-finite numbers and unknown region ids are not errors here:
they render as placeholders or fall back to the unmodified input. These
exceptions cover request validation, AI providers and export targets.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SCHEMA = "INVALID_SCHEMA"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"

    # Insight / AI Errors
    AI_PROVIDER_ERROR = "AI_PROVIDER_ERROR"
    AI_PROVIDER_UNAVAILABLE = "AI_PROVIDER_UNAVAILABLE"
    AI_INVALID_RESPONSE = "AI_INVALID_RESPONSE"
    LLM_RATE_LIMIT = "LLM_RATE_LIMIT"

    # Export Errors
    EXPORT_TARGET_NOT_FOUND = "EXPORT_TARGET_NOT_FOUND"
    EXPORT_FAILED = "EXPORT_FAILED"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BlockPlaneError(Exception):
    """Base exception for BlockPlane errors.

    Provides structured error information for API responses.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize BlockPlaneError.

        Args:
            code: Error code from ErrorCode constants
            message: Human-readable error message
            details: Additional error context
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response.

        Returns:
            Dictionary with code, message, and details.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"BlockPlaneError(code={self.code!r}, message={self.message!r})"


class ValidationError(BlockPlaneError):
    """Validation-specific error."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={**(details or {}), "field": field} if field else details
        )


class InsightProviderError(BlockPlaneError):
    """An AI provider failed to produce insight text."""

    def __init__(
        self,
        message: str,
        provider: str,
        code: str = ErrorCode.AI_PROVIDER_ERROR,
        details: Optional[Dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "provider": provider}
        )
        self.provider = provider


class InsightProviderUnavailableError(InsightProviderError):
    """Provider has no credentials in this deployment.

    Callers treat this as an ordinary generation failure.
    """

    def __init__(self, provider: str, hint: str = ""):
        message = f"{provider} provider is not available in this build."
        if hint:
            message = f"{message} {hint}"
        super().__init__(
            message=message,
            provider=provider,
            code=ErrorCode.AI_PROVIDER_UNAVAILABLE,
        )


class ExportTargetNotFoundError(BlockPlaneError):
    """An export referenced an input (chart image, output directory) that does not exist."""

    def __init__(self, target: str, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.EXPORT_TARGET_NOT_FOUND,
            message=f"Export target \"{target}\" not found",
            details={**(details or {}), "target": target}
        )
        self.target = target
