"""Unit tests for the resolution of JIRA custom field keys."""

from typing import Any

import pytest

from issue_sync.configuration.exceptions import MissingCustomFieldError
from issue_sync.synchronize.fields import FieldKeys
from issue_sync.synchronize.models import FieldRole


def make_field_metadata(name: str, custom_id: int) -> dict[str, Any]:
    """Build an entry as returned by the JIRA field metadata endpoint."""
    return {
        "id": f"customfield_{custom_id}",
        "name": name,
        "custom": True,
        "schema": {"type": "string", "custom": "com.atlassian.jira.plugin.system.customfieldtypes:textfield", "customId": custom_id},
    }


ALL_FIELDS = [
    {"id": "summary", "name": "Summary", "custom": False, "schema": {"type": "string", "system": "summary"}},
    make_field_metadata("GitHub ID", 10001),
    make_field_metadata("GitHub Number", 10002),
    make_field_metadata("GitHub Labels", 10003),
    make_field_metadata("GitHub Status", 10004),
    make_field_metadata("GitHub Reporter", 10005),
    make_field_metadata("Last Issue-Sync Update", 10006),
]


def test_from_jira_fields_resolves_every_role() -> None:
    """Test that every role is resolved from its exact display name."""
    field_keys = FieldKeys.from_jira_fields(ALL_FIELDS)
    assert field_keys.field_key(FieldRole.GITHUB_ID) == "customfield_10001"
    assert field_keys.field_key(FieldRole.GITHUB_NUMBER) == "customfield_10002"
    assert field_keys.field_key(FieldRole.GITHUB_LABELS) == "customfield_10003"
    assert field_keys.field_key(FieldRole.GITHUB_STATUS) == "customfield_10004"
    assert field_keys.field_key(FieldRole.GITHUB_REPORTER) == "customfield_10005"
    assert field_keys.field_key(FieldRole.LAST_SYNC) == "customfield_10006"
    assert field_keys.field_id(FieldRole.GITHUB_ID) == "10001"


def test_from_jira_fields_names_every_missing_field() -> None:
    """Test that the error lists all the custom fields that could not be found."""
    fields = [field for field in ALL_FIELDS if field["name"] not in ("GitHub Labels", "Last Issue-Sync Update")]
    with pytest.raises(MissingCustomFieldError) as exc_info:
        FieldKeys.from_jira_fields(fields)

    assert exc_info.value.field_names == ["GitHub Labels", "Last Issue-Sync Update"]
    assert "'GitHub Labels'" in str(exc_info.value)


def test_from_jira_fields_requires_exact_names() -> None:
    """Test that a field with a differently cased name is not matched."""
    fields = [field for field in ALL_FIELDS if field["name"] != "GitHub ID"] + [make_field_metadata("Github ID", 10099)]
    with pytest.raises(MissingCustomFieldError) as exc_info:
        FieldKeys.from_jira_fields(fields)

    assert exc_info.value.field_names == ["GitHub ID"]


def test_from_jira_fields_falls_back_to_field_id() -> None:
    """Test that a field without a custom ID in its schema is keyed by its ID."""
    fields = [field for field in ALL_FIELDS if field["name"] != "GitHub Status"] + [{"id": "customfield_20000", "name": "GitHub Status"}]
    field_keys = FieldKeys.from_jira_fields(fields)
    assert field_keys.field_key(FieldRole.GITHUB_STATUS) == "customfield_20000"


def test_mapping_round_trip() -> None:
    """Test that the cached mapping restores the same field keys."""
    field_keys = FieldKeys.from_jira_fields(ALL_FIELDS)
    mapping = field_keys.to_mapping()

    assert mapping["github_id"] == "customfield_10001"
    assert mapping["last_sync"] == "customfield_10006"
    assert FieldKeys.from_mapping(mapping) == field_keys


def test_from_mapping_accepts_bare_ids() -> None:
    """Test that a hand-written cache with bare numeric IDs is accepted."""
    mapping = {role.name.lower(): str(10001 + index) for index, role in enumerate(FieldRole)}
    field_keys = FieldKeys.from_mapping(mapping)
    assert field_keys.field_key(FieldRole.GITHUB_ID) == "customfield_10001"


def test_from_mapping_incomplete() -> None:
    """Test that an incomplete cache is rejected."""
    with pytest.raises(MissingCustomFieldError):
        FieldKeys.from_mapping({"github_id": "customfield_10001"})
