"""Per-repository state shared by the reconciliation functions."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from issue_sync.github.abc import GitHubClientBase
from issue_sync.jira.abc import JiraClientBase
from issue_sync.synchronize.fields import FieldKeys
from issue_sync.synchronize.markup import MarkupTranslator, default_translator
from issue_sync.utils.constants import DEFAULT_JIRA_ISSUE_TYPE

if TYPE_CHECKING:
    from datetime import datetime

    from issue_sync.synchronize.comments import CommentReconciler


@dataclass
class SyncContext:
    """Everything one repository/project pass needs, passed explicitly instead of held globally."""

    github_adapter: GitHubClientBase
    jira_adapter: JiraClientBase
    field_keys: FieldKeys
    repo: str
    project_key: str
    since: "datetime | None" = None
    issue_type: str = DEFAULT_JIRA_ISSUE_TYPE
    dry_run: bool = False
    translator: MarkupTranslator = field(default_factory=lambda: default_translator)
    comment_reconciler: "CommentReconciler | None" = None
