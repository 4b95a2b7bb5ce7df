"""Shared constants used across the application."""

# This file is intended to hold shared constants.

# Date Formats
# ------------

SINCE_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
"""Format of the `since` cursor in configuration (e.g., 2017-06-01T10:00:00+0000)."""

DEFAULT_SINCE = "1970-01-01T00:00:00+0000"
"""Cursor used when no `since` value has been configured."""

JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.0%z"
"""Format JIRA expects for DateTime custom fields (e.g., 2011-10-19T10:29:29.0+1100)."""

# JIRA Settings
# -------------

DEFAULT_JIRA_ISSUE_TYPE = "Task"
"""Issue type used when creating JIRA issues."""

JIRA_MAX_COMMENT_LENGTH = 32767
"""JIRA's maximum length of a comment body."""

JIRA_SEARCH_PAGE_SIZE = 100
"""Number of issues requested per JQL search page."""

JIRA_IMAGE_WIDTH = 600
"""Display width hint applied to images embedded in translated markup."""

# Runtime Defaults
# ----------------

DEFAULT_TIMEOUT_SECONDS = 60.0
"""Default timeout applied to every API call."""

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub API URL."""

CONFIG_FILE_CANDIDATES = (".issue-sync.yaml", ".issue-sync.json")
"""Config file names searched for in the working and home directories."""

TRUNCATION_SUFFIX = "\n... [truncated - {remaining} characters removed]"
"""Appended to comment bodies cut down to JIRA's maximum length."""
