"""Per-repository mirror workflow.

For each repository and its resolved target the orchestrator checks whether
a mirror already exists, creates it when absent, stars it when the source
repository was starred, and replicates issues when enabled. Only the
existence check and the mirror creation can fail a repository; starring and
issue replication warn and move on.
"""

from __future__ import annotations

import typing as typ

from gitea_mirror.errors import IssueFetchError, MirrorCreateError, StarError
from gitea_mirror.gitea.errors import GiteaAPIError
from gitea_mirror.gitea.models import MigrateRepositoryRequest
from gitea_mirror.logging import get_logger, log_dry_run, log_info, log_warning

from .outcomes import MirrorAction, MirrorOutcome, MirrorState, SideEffectResult

if typ.TYPE_CHECKING:
    from gitea_mirror.config import MirrorConfig
    from gitea_mirror.discovery.models import Repository
    from gitea_mirror.gitea.client import GiteaDestination
    from gitea_mirror.gitea.models import Target

    from .issues import IssueReplicator

logger = get_logger(__name__)

STAR = "star"
ISSUES = "issues"


class MirrorOrchestrator:
    """Bring one repository's destination mirror up to date."""

    def __init__(
        self,
        destination: GiteaDestination,
        config: MirrorConfig,
        issues: IssueReplicator,
    ) -> None:
        """Initialise the orchestrator with its collaborators."""
        self._destination = destination
        self._config = config
        self._issues = issues

    async def mirror(self, repo: Repository, target: Target) -> MirrorOutcome:
        """Mirror ``repo`` into ``target`` and return what happened.

        Running twice against an unchanged destination is safe: the second
        run finds the mirror and at most re-stars it.
        """
        try:
            exists = await self._destination.repository_exists(target, repo.name)
        except GiteaAPIError as exc:
            return MirrorOutcome.failed(
                repo.name, target, MirrorCreateError(repo.name, str(exc))
            )

        if exists:
            return await self._reconcile_existing(repo, target)
        if self._config.dry_run:
            return self._plan_mirror(repo, target)
        return await self._create_mirror(repo, target)

    async def _reconcile_existing(
        self, repo: Repository, target: Target
    ) -> MirrorOutcome:
        if not repo.starred:
            log_info(
                logger,
                "Repository %s is already mirrored in %s %s; doing nothing.",
                repo.name,
                target.kind,
                target.name,
            )
            return MirrorOutcome(
                repository=repo.name,
                target=target,
                action=MirrorAction.NOOP,
                state=MirrorState.MIRRORED,
            )

        log_info(
            logger,
            "Repository %s is already mirrored in %s %s; "
            "checking if it needs to be starred.",
            repo.name,
            target.kind,
            target.name,
        )
        star = await self._star(repo, target)
        return MirrorOutcome(
            repository=repo.name,
            target=target,
            action=MirrorAction.STARRED,
            state=MirrorState.MIRRORED,
            side_effects=(star,),
        )

    def _plan_mirror(self, repo: Repository, target: Target) -> MirrorOutcome:
        if repo.starred:
            log_dry_run(
                logger,
                "Would mirror and star repository to %s %s: %s (starred)",
                target.kind,
                target.name,
                repo.clone_url,
            )
        else:
            log_dry_run(
                logger,
                "Would mirror repository to %s %s: %s",
                target.kind,
                target.name,
                repo.clone_url,
            )
        return MirrorOutcome(
            repository=repo.name,
            target=target,
            action=MirrorAction.DRY_RUN,
            state=MirrorState.ABSENT,
        )

    async def _create_mirror(self, repo: Repository, target: Target) -> MirrorOutcome:
        log_info(
            logger,
            "Mirroring repository to %s %s: %s%s",
            target.kind,
            target.name,
            repo.clone_url,
            " (will be starred)" if repo.starred else "",
        )
        request = MigrateRepositoryRequest(
            clone_addr=repo.clone_url,
            repo_name=repo.name,
            uid=target.id,
            mirror=True,
            private=repo.private,
            auth_token=self._config.github.token or None,
        )
        try:
            await self._destination.migrate_repository(request)
        except GiteaAPIError as exc:
            return MirrorOutcome.failed(
                repo.name,
                target,
                MirrorCreateError(repo.name, str(exc)),
                state=MirrorState.ABSENT,
            )

        side_effects: list[SideEffectResult] = []
        if repo.starred:
            side_effects.append(await self._star(repo, target))
        side_effects.append(await self._replicate_issues(repo, target))
        return MirrorOutcome(
            repository=repo.name,
            target=target,
            action=MirrorAction.CREATED,
            state=MirrorState.ABSENT,
            side_effects=tuple(side_effects),
        )

    async def _star(self, repo: Repository, target: Target) -> SideEffectResult:
        if self._config.dry_run:
            log_dry_run(
                logger, "Would star repository in Gitea: %s/%s", target.name, repo.name
            )
            return SideEffectResult.skipped(STAR, "dry run")

        try:
            await self._destination.star_repository(target, repo.name)
        except GiteaAPIError as exc:
            error = StarError(f"{target.name}/{repo.name}", str(exc))
            log_warning(logger, "Error starring repository %s: %s", repo.name, exc)
            return SideEffectResult.warned(STAR, error)
        return SideEffectResult.ok(STAR)

    async def _replicate_issues(
        self, repo: Repository, target: Target
    ) -> SideEffectResult:
        if not self._config.github.mirror_issues:
            return SideEffectResult.skipped(ISSUES, "issue mirroring disabled")
        if repo.starred and self._config.github.skip_starred_issues:
            log_info(logger, "Skipping issues for starred repository: %s", repo.name)
            return SideEffectResult.skipped(ISSUES, "starred repository")

        try:
            result = await self._issues.replicate(repo, target)
        except IssueFetchError as exc:
            log_warning(logger, "Failed to mirror issues for %s: %s", repo.name, exc)
            return SideEffectResult.warned(ISSUES, exc)

        if result.skipped_reason is not None:
            return SideEffectResult.skipped(ISSUES, result.skipped_reason)
        return SideEffectResult.ok(
            ISSUES, f"{result.created} of {result.fetched} issues created"
        )
