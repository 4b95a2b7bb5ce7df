"""Internal data models for GitHub and JIRA issues."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

from issue_sync.synchronize.utils import extract_label_names

if TYPE_CHECKING:
    from issue_sync.synchronize.fields import FieldKeys
    from issue_sync.synchronize.markup import MarkupTranslator


class SyncDecision(Enum):
    """Enum for sync decisions."""

    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


class FieldRole(str, Enum):
    """Logical roles of the JIRA custom fields used to track GitHub issues.

    The value of each member is the exact display name of the custom field in JIRA.
    """

    GITHUB_ID = "GitHub ID"
    GITHUB_NUMBER = "GitHub Number"
    GITHUB_LABELS = "GitHub Labels"
    GITHUB_STATUS = "GitHub Status"
    GITHUB_REPORTER = "GitHub Reporter"
    LAST_SYNC = "Last Issue-Sync Update"


@dataclass(frozen=True)
class SourceIssue:
    """Read-only snapshot of a GitHub issue."""

    id: int
    number: int
    title: str
    body: str
    state: str
    author: str
    labels: tuple[str, ...] = ()
    updated_at: datetime | None = None
    html_url: str | None = None

    @classmethod
    def from_github(cls, issue: Any) -> "SourceIssue":
        """Build a snapshot from a githubkit issue (or any object shaped like one)."""
        user = getattr(issue, "user", None)
        return cls(
            id=issue.id,
            number=issue.number,
            title=issue.title,
            body=issue.body or "",
            state=str(issue.state),
            author=getattr(user, "login", "") or "",
            labels=tuple(extract_label_names(getattr(issue, "labels", None) or [])),
            updated_at=getattr(issue, "updated_at", None),
            html_url=getattr(issue, "html_url", None),
        )


@dataclass(frozen=True)
class TranslatedIssue:
    """A GitHub issue paired with its body rendered as JIRA markup."""

    source: SourceIssue
    translated_body: str

    @classmethod
    def from_source(cls, source: SourceIssue, translator: "MarkupTranslator") -> "TranslatedIssue":
        """Translate the body of a GitHub issue once for the current reconciliation."""
        return cls(source=source, translated_body=translator.translate(source.body))

    @property
    def joined_labels(self) -> str:
        """Label names joined by commas, in the order GitHub returned them."""
        return ",".join(self.source.labels)


@dataclass
class JiraComment:
    """A comment on a JIRA issue."""

    id: str
    body: str


def _read_int(value: Any) -> int | None:
    """Interpret a custom field value as an integer, or None if it cannot be."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            try:
                number = float(value)
            except ValueError:
                return None
            return int(number) if number.is_integer() else None
    return None


def _read_str(value: Any) -> str | None:
    """Interpret a custom field value as a string, or None if it is not one."""
    return value if isinstance(value, str) else None


@dataclass
class JiraIssue:
    """Snapshot of a JIRA issue with the GitHub tracking fields broken out.

    A role attribute set to None means the field was absent or unreadable.
    Fields this application does not model are kept verbatim in `extra_fields`.
    """

    key: str
    id: str
    summary: str = ""
    description: str | None = None
    issue_type: dict[str, Any] = field(default_factory=dict)
    github_id: int | None = None
    github_number: int | None = None
    github_labels: str | None = None
    github_status: str | None = None
    github_reporter: str | None = None
    last_sync: str | None = None
    comments: list[JiraComment] = field(default_factory=list)
    extra_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any], field_keys: "FieldKeys") -> "JiraIssue":
        """Build a snapshot from a JIRA REST API issue payload."""
        fields: dict[str, Any] = dict(payload.get("fields") or {})

        role_values = {role: fields.pop(field_keys.field_key(role), None) for role in FieldRole}

        comment_block = fields.pop("comment", None) or {}
        comments = [
            JiraComment(id=str(comment.get("id", "")), body=comment.get("body") or "")
            for comment in comment_block.get("comments", [])
        ]

        return cls(
            key=payload.get("key", ""),
            id=str(payload.get("id", "")),
            summary=fields.pop("summary", None) or "",
            description=_read_str(fields.pop("description", None)),
            issue_type=fields.pop("issuetype", None) or {},
            github_id=_read_int(role_values[FieldRole.GITHUB_ID]),
            github_number=_read_int(role_values[FieldRole.GITHUB_NUMBER]),
            github_labels=_read_str(role_values[FieldRole.GITHUB_LABELS]),
            github_status=_read_str(role_values[FieldRole.GITHUB_STATUS]),
            github_reporter=_read_str(role_values[FieldRole.GITHUB_REPORTER]),
            last_sync=_read_str(role_values[FieldRole.LAST_SYNC]),
            comments=comments,
            extra_fields=fields,
        )
