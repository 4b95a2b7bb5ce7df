"""Contains utility functions for synchronization actions."""

from typing import Any, Sequence

from issue_sync.synchronize.types import HasName, LabelType


def value_is_noney(value: Any) -> bool:
    """Check if a value is None, an empty list, an empty string, or an empty dict."""
    if value is None:
        return True
    elif isinstance(value, list) and value == []:
        return True
    elif isinstance(value, str) and value == "":
        return True
    elif isinstance(value, dict) and not value:
        return True
    return False


def jira_field_differs(github_value: Any, jira_value: Any) -> bool:
    """Compare a GitHub-derived value and a JIRA field value.

    JIRA stores empty text fields as null, so an empty value on one side and a
    missing value on the other are considered equal.
    """
    if value_is_noney(github_value) and value_is_noney(jira_value):
        return False
    return bool(github_value != jira_value)


def extract_label_names(labels: Sequence[LabelType]) -> list[str]:
    """Extract label names from a list of GitHub label objects, strings, or dicts.

    Order is preserved and duplicate names are dropped.
    """
    names: list[str] = []
    for label in labels:
        if isinstance(label, str):
            name = label
        elif isinstance(label, dict) and "name" in label:
            name = label["name"]
        elif isinstance(label, HasName):
            name = label.name
        else:
            continue
        if name and name not in names:
            names.append(name)
    return names
