"""Utilities for truncating content to fit within JIRA's character limits."""

from __future__ import annotations

from issue_sync.utils.constants import TRUNCATION_SUFFIX


def truncate_string_at_end(
    content: str,
    max_length: int,
    truncation_suffix: str = TRUNCATION_SUFFIX,
) -> tuple[str, bool]:
    """Truncate a string at the end if it exceeds max_length.

    Args:
        content: The string to potentially truncate.
        max_length: Maximum allowed length for the result (including truncation suffix).
        truncation_suffix: Template for truncation indicator with {remaining} placeholder.

    Returns:
        Tuple of (truncated_content, was_truncated).
        If truncation occurs, the result includes the truncation suffix.
    """
    if not content or len(content) <= max_length:
        return content, False

    remaining_chars = len(content) - max_length
    suffix = truncation_suffix.format(remaining=remaining_chars)

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        # max_length is smaller than the suffix itself
        return content[:max_length], True

    return content[:truncate_at] + suffix, True
