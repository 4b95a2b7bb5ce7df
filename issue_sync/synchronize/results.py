"""Contains results of application execution."""

from collections import Counter
from dataclasses import dataclass, field

from issue_sync.synchronize.models import JiraIssue, SourceIssue, SyncDecision


class IssueSynchronizationResult:
    """Contains results of the reconciliation of a single GitHub issue."""

    def __init__(
        self,
        github_issue: SourceIssue,
        jira_issue: JiraIssue | None,
        decision: SyncDecision,
        error: str | None = None,
        comment_error: str | None = None,
    ) -> None:
        """Initialize the result with the GitHub issue, the JIRA issue, and the decision."""
        self.github_issue = github_issue
        self.jira_issue = jira_issue
        self.decision = decision
        self.error = error
        self.comment_error = comment_error

    @property
    def succeeded(self) -> bool:
        """Whether the issue was reconciled without any error."""
        return self.error is None and self.comment_error is None

    def __repr__(self) -> str:
        return (
            f"IssueSynchronizationResult(github_issue_number={self.github_issue.number}, "
            f"jira_issue_key={self.jira_issue.key if self.jira_issue else None!r}, decision={self.decision.value}, error={self.error!r})"
        )


class AllIssueSynchronizationResults:
    """Contains results of the issue synchronization workflow for all issues."""

    def __init__(self, results: list[IssueSynchronizationResult]) -> None:
        """Initialize the result with a list of issue synchronization results."""
        self.results = results

    @property
    def decision_counts(self) -> dict[SyncDecision, int]:
        """Number of issues per sync decision."""
        counts = Counter(result.decision for result in self.results)
        return {decision: counts.get(decision, 0) for decision in SyncDecision}

    @property
    def failures(self) -> list[IssueSynchronizationResult]:
        """Results for issues that hit a write or comment error."""
        return [result for result in self.results if not result.succeeded]


@dataclass
class RepositorySyncResult:
    """Outcome of the pass over one repository/project pair."""

    repo: str
    project_key: str
    issue_results: AllIssueSynchronizationResults | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class SyncPassResult:
    """Outcome of one reconciliation pass over every configured repository/project pair."""

    repositories: list[RepositorySyncResult] = field(default_factory=list)

    @property
    def failures(self) -> list[RepositorySyncResult]:
        return [repository for repository in self.repositories if not repository.succeeded]

    @property
    def succeeded(self) -> bool:
        """Whether every repository pass completed; per-issue errors do not count."""
        return not self.failures
