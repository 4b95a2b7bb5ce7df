"""Resolves the JIRA custom fields that carry GitHub issue data."""

from typing import Any, Iterable, Mapping

import structlog

from issue_sync.configuration.exceptions import MissingCustomFieldError
from issue_sync.synchronize.models import FieldRole

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class FieldKeys:
    """Maps each field role to its JIRA field key (e.g., customfield_10001).

    Instances are built once per run and treated as read-only afterwards.
    """

    def __init__(self, keys: Mapping[FieldRole, str]) -> None:
        """Initialize the mapping, failing if any role is left unresolved."""
        missing = [role.value for role in FieldRole if not keys.get(role)]
        if missing:
            raise MissingCustomFieldError(missing)
        self._keys: dict[FieldRole, str] = {role: keys[role] for role in FieldRole}

    def field_key(self, role: FieldRole) -> str:
        """Return the JIRA field key for a role."""
        return self._keys[role]

    def field_id(self, role: FieldRole) -> str:
        """Return the numeric custom field ID for a role, as used in JQL (cf[NNNNN])."""
        return self._keys[role].removeprefix("customfield_")

    def to_mapping(self) -> dict[str, str]:
        """Serialize the mapping for the configuration file cache."""
        return {role.name.lower(): key for role, key in self._keys.items()}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "FieldKeys":
        """Restore a mapping previously produced by `to_mapping`."""
        keys: dict[FieldRole, str] = {}
        for role in FieldRole:
            value = mapping.get(role.name.lower())
            if value:
                keys[role] = value if str(value).startswith("customfield_") else f"customfield_{value}"
        return cls(keys)

    @classmethod
    def from_jira_fields(cls, fields: Iterable[Mapping[str, Any]]) -> "FieldKeys":
        """Resolve the mapping from JIRA field metadata (the `/rest/api/2/field` endpoint).

        Fields are matched on their exact display name.
        """
        logger.debug("Collecting custom field IDs")
        roles_by_name = {role.value: role for role in FieldRole}
        keys: dict[FieldRole, str] = {}
        for jira_field in fields:
            role = roles_by_name.get(jira_field.get("name", ""))
            if role is None or role in keys:
                continue
            custom_id = (jira_field.get("schema") or {}).get("customId")
            if custom_id is not None:
                keys[role] = f"customfield_{custom_id}"
            elif jira_field.get("id"):
                keys[role] = jira_field["id"]
        field_keys = cls(keys)
        logger.debug("All custom fields have been resolved", fields=field_keys.to_mapping())
        return field_keys

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldKeys):
            return NotImplemented
        return self._keys == other._keys

    def __repr__(self) -> str:
        return f"FieldKeys({self.to_mapping()!r})"
