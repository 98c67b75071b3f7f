"""Error types shared by the relay, the API client and the column layer."""


class InvalidInput(ValueError):
    """Raised when a comparison request fails validation.

    The message names the offending field and is safe to show to the user.
    """


class UpstreamError(Exception):
    """Raised when the LLM provider call fails or returns an unusable response."""

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        self.error_type = error_type


class MissingPromptStore(RuntimeError):
    """Raised when a column is created without a shared prompt store."""


class ComparisonApiError(Exception):
    """Raised by the API client when a compare call does not succeed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
