"""Exceptions raised while synchronizing issues."""


class IssueVerificationError(Exception):
    """A JIRA issue could not be fetched back after being created, updated or verified.

    The pass can no longer trust its view of JIRA, so the repository pass is aborted.
    """

    def __init__(self, message: str, github_issue_number: int | None = None, jira_issue_key: str | None = None) -> None:
        """Initialize the error with the issue that could not be verified."""
        super().__init__(message)
        self.github_issue_number = github_issue_number
        self.jira_issue_key = jira_issue_key
