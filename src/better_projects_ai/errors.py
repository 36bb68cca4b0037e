"""Error taxonomy for the AI service."""

from typing import Any, Optional


class AIServiceError(Exception):
    """Base exception for AI service errors."""

    status_code: int = 500
    kind: str = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationUnavailable(AIServiceError):
    """No upstream credential is configured.

    Not a user-facing error: callers switch to their local fallback.
    """

    status_code = 503
    kind = "llm_unavailable"


class UpstreamError(AIServiceError):
    """The LLM provider call failed (transport error or non-2xx response)."""

    status_code = 502
    kind = "upstream_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Any] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.upstream_status = status_code
        self.payload = payload
        self.original_error = original_error

    @property
    def is_transport_failure(self) -> bool:
        """True when the provider never answered with an error payload."""
        return self.upstream_status is None and self.payload is None


class ParseError(AIServiceError):
    """LLM output could not be parsed into the expected structure."""

    kind = "parse_error"

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class ValidationError(AIServiceError):
    """A request is missing a required field or carries an invalid value."""

    status_code = 400
    kind = "validation_error"


class NotFoundError(AIServiceError):
    """The referenced task/project/team does not exist."""

    status_code = 404
    kind = "not_found"

    def __init__(self, entity_kind: str, entity_id: str):
        super().__init__(f"{entity_kind.capitalize()} not found: {entity_id}")
        self.entity_kind = entity_kind
        self.entity_id = entity_id
