"""Issue replication from a source repository to its mirror.

Replication is best effort: issues are created one at a time in source
order, and a failed issue or label is logged without stopping the rest.
"""

from __future__ import annotations

import dataclasses
import secrets
import typing as typ

from gitea_mirror.errors import IssueCreateError, IssueFetchError, LabelError
from gitea_mirror.gitea.errors import GiteaAPIError
from gitea_mirror.gitea.models import (
    CreateIssueRequest,
    CreateLabelRequest,
    IssueLabelsRequest,
)
from gitea_mirror.github.errors import GitHubAPIError, GitHubResponseShapeError
from gitea_mirror.logging import get_logger, log_dry_run, log_info, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from gitea_mirror.discovery.models import Repository
    from gitea_mirror.gitea.client import GiteaDestination
    from gitea_mirror.gitea.models import Target
    from gitea_mirror.github.client import GitHubSourceClient
    from gitea_mirror.github.models import GitHubIssue

logger = get_logger(__name__)

_COLOR_SPACE = 0xFFFFFF


def random_label_color() -> str:
    """Return a random six-digit hex colour for a new label."""
    return f"{secrets.randbelow(_COLOR_SPACE):06x}"


def format_issue_body(issue: GitHubIssue) -> str:
    """Prefix an issue body with its original author and creation date.

    Examples
    --------
    >>> import datetime as dt
    >>> from gitea_mirror.github.models import GitHubIssue
    >>> issue = GitHubIssue(
    ...     number=1,
    ...     title="Crash",
    ...     body="Steps",
    ...     state="open",
    ...     author_login="octo",
    ...     created_at=dt.datetime(2024, 5, 1, tzinfo=dt.UTC),
    ... )
    >>> format_issue_body(issue)
    '*Originally created by @octo on 2024-05-01*\\n\\nSteps'

    """
    created = issue.created_at.strftime("%Y-%m-%d")
    return f"*Originally created by @{issue.author_login} on {created}*\n\n{issue.body}"


@dataclasses.dataclass(slots=True)
class IssueReplicationResult:
    """Counters for one repository's issue replication."""

    repository: str
    fetched: int = 0
    created: int = 0
    failed: int = 0
    label_failures: int = 0
    skipped_reason: str | None = None


class IssueReplicator:
    """Recreate a repository's source issues at its destination mirror."""

    def __init__(
        self,
        source: GitHubSourceClient,
        destination: GiteaDestination,
        *,
        dry_run: bool = False,
        color_factory: cabc.Callable[[], str] = random_label_color,
    ) -> None:
        """Initialise the replicator with both API collaborators."""
        self._source = source
        self._destination = destination
        self._dry_run = dry_run
        self._color_factory = color_factory

    async def replicate(
        self, repo: Repository, target: Target
    ) -> IssueReplicationResult:
        """Copy every source issue of ``repo`` into ``target``.

        Raises
        ------
        IssueFetchError
            If the source issue list cannot be fetched.

        """
        result = IssueReplicationResult(repository=repo.slug)
        if not repo.has_issues:
            log_info(
                logger,
                "Repository %s doesn't have issues enabled. Skipping issues mirroring.",
                repo.name,
            )
            result.skipped_reason = "issues disabled"
            return result

        if self._dry_run:
            log_dry_run(logger, "Would mirror issues for repository: %s", repo.name)
            result.skipped_reason = "dry run"
            return result

        issues = await self._fetch(repo)
        result.fetched = len(issues)
        log_info(logger, "Found %d issues for %s", len(issues), repo.name)

        for issue in issues:
            try:
                number = await self._create_issue(issue, repo, target)
            except IssueCreateError as exc:
                log_warning(logger, "%s", exc)
                result.failed += 1
                continue

            result.created += 1
            log_info(logger, "Created issue #%d: %s", number, issue.title)
            result.label_failures += await self._apply_labels(
                issue, number, repo, target
            )

        log_info(logger, "Completed mirroring issues for %s", repo.name)
        return result

    async def _fetch(self, repo: Repository) -> list[GitHubIssue]:
        try:
            issues = self._source.iter_issues(repo.owner, repo.name)
            return [issue async for issue in issues]
        except (GitHubAPIError, GitHubResponseShapeError) as exc:
            raise IssueFetchError(repo.slug, str(exc)) from exc

    async def _create_issue(
        self, issue: GitHubIssue, repo: Repository, target: Target
    ) -> int:
        request = CreateIssueRequest(
            title=issue.title,
            body=format_issue_body(issue),
            closed=issue.closed,
        )
        try:
            return await self._destination.create_issue(target, repo.name, request)
        except GiteaAPIError as exc:
            raise IssueCreateError(issue.title, str(exc)) from exc

    async def _apply_labels(
        self, issue: GitHubIssue, number: int, repo: Repository, target: Target
    ) -> int:
        """Create and attach each label; return the number that failed."""
        failures = 0
        for label in issue.labels:
            try:
                await self._attach_label(label, number, repo, target)
            except LabelError as exc:
                log_warning(logger, "%s", exc)
                failures += 1
        return failures

    async def _attach_label(
        self, label: str, number: int, repo: Repository, target: Target
    ) -> None:
        try:
            await self._destination.create_label(
                target,
                repo.name,
                CreateLabelRequest(name=label, color=self._color_factory()),
            )
            await self._destination.add_issue_labels(
                target, repo.name, number, IssueLabelsRequest(labels=[label])
            )
        except GiteaAPIError as exc:
            raise LabelError(label, str(exc)) from exc
