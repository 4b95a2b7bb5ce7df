"""Contains exceptions raised by the JIRA client adapter."""


class JiraApiError(Exception):
    """Raised when a JIRA API call fails, whether at the transport level or with a non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        """Initializes the exception with the HTTP status code and URL, when known."""
        super().__init__(message)
        self.status_code = status_code
        self.url = url
