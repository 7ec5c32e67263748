"""Exceptions raised by the Airtable adapter."""


class AirtableRequestError(Exception):
    """Raised when an Airtable API request returns a non-success status."""

    def __init__(self, status_code: int, message: str, retry_after: float | None = None) -> None:
        """Initializes the exception with the HTTP status and Airtable's error message."""
        super().__init__(f"Airtable request failed with status {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.retry_after = retry_after

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_retryable(self) -> bool:
        """Rate limiting (429) and server errors (5xx) are worth retrying."""
        return self.status_code == 429 or self.is_server_error
