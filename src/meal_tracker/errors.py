"""Error types surfaced to API callers."""

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError


class MealTrackerError(Exception):
    """Base error with a stable machine-readable kind."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict[str, str]:
        """Return the error payload sent to clients."""
        return {"error": self.kind, "message": self.message}


class InvalidInput(MealTrackerError):
    """Input rejected before it reaches aggregation or scaling."""

    kind = "invalid_input"

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInput":
        """Summarize pydantic validation errors as one message."""
        return cls.from_errors(exc.errors())

    @classmethod
    def from_errors(cls, errors: Sequence[Any]) -> "InvalidInput":
        """Build the error from pydantic-style error dicts."""
        parts = []
        for error in errors:
            location = ".".join(str(part) for part in error["loc"]) or "payload"
            parts.append(f"{location}: {error['msg']}")
        return cls("; ".join(parts))


class NotFound(MealTrackerError):
    """Requested record does not exist."""

    kind = "not_found"


class FoodRecognitionError(MealTrackerError):
    """Failure while analyzing a food image."""

    kind = "food_recognition_error"


class MalformedUpstreamResponse(FoodRecognitionError):
    """Upstream answered, but without a usable JSON object."""

    kind = "malformed_upstream_response"


class RateLimited(FoodRecognitionError):
    """Upstream rejected the call for rate limiting; retry later."""

    kind = "rate_limited"


class QuotaExceeded(FoodRecognitionError):
    """Upstream billing or credit quota is exhausted."""

    kind = "quota_exceeded"


class UpstreamError(FoodRecognitionError):
    """Any other upstream failure."""

    kind = "upstream_error"

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
