class FilesError(Exception):
    """Base class for every error raised by the Files client."""


class RequestInputError(FilesError):
    """Raised before any network call when the caller's input is invalid."""


class IntegrationError(FilesError):
    """Raised when a call to the Files API fails."""


class FetchError(IntegrationError):
    """Raised when the Files API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        error_details: list | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.error_details = error_details


class AuthenticationError(FetchError):
    """Raised when the API key is missing, invalid or not allowed."""


class RateLimitError(FetchError):
    """Raised when the Files API rate limit is hit."""
