"""Destination target resolution.

Each repository maps to exactly one target through an ordered rule list:

1. starred repositories go to the starred-repositories organization;
2. with organization structure preserved, organization repositories go to
   the like-named destination organization resolved before the run loop;
3. everything else goes to the configured destination organization, or to
   the authenticated destination user.

A rule returns ``None`` when it does not apply. Rules 1 and 2 fall back to
rule 3 with a warning when their organization is unavailable.
"""

from __future__ import annotations

import typing as typ

from gitea_mirror.errors import TargetResolutionError
from gitea_mirror.gitea.errors import GiteaAPIError
from gitea_mirror.logging import (
    get_logger,
    log_dry_run,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from gitea_mirror.config import MirrorConfig
    from gitea_mirror.discovery.models import Repository
    from gitea_mirror.gitea.client import GiteaDestination
    from gitea_mirror.gitea.models import Target

    TargetRule: typ.TypeAlias = cabc.Callable[[Repository], cabc.Awaitable[Target | None]]

logger = get_logger(__name__)


async def ensure_organization(
    destination: GiteaDestination,
    name: str,
    visibility: str,
    *,
    dry_run: bool,
) -> None:
    """Make sure a destination organization exists.

    In dry-run mode nothing is created; the intended action is logged.

    Raises
    ------
    GiteaAPIError
        If the organization cannot be created.

    """
    if dry_run:
        log_dry_run(
            logger, "Would create Gitea organization: %s (%s)", name, visibility
        )
        return
    await destination.create_organization(name, visibility)


async def prepare_organization_targets(
    destination: GiteaDestination,
    config: MirrorConfig,
    repositories: cabc.Iterable[Repository],
) -> dict[str, Target]:
    """Resolve one destination target per unique source organization.

    Only used when organization structure is preserved. Organizations that
    cannot be created or looked up are left out of the map; their
    repositories later fall back to the default target.
    """
    if not config.github.preserve_org_structure:
        return {}

    names = dict.fromkeys(
        repo.organization for repo in repositories if repo.organization
    )
    targets: dict[str, Target] = {}
    for name in names:
        log_info(
            logger, "Preparing Gitea organization for GitHub organization: %s", name
        )
        try:
            await ensure_organization(
                destination, name, config.gitea.visibility, dry_run=config.dry_run
            )
        except GiteaAPIError as exc:
            log_error(logger, "Error creating Gitea organization %s: %s", name, exc)
            continue

        try:
            targets[name] = await destination.get_organization(name)
        except GiteaAPIError as exc:
            log_error(logger, "Error getting Gitea organization %s: %s", name, exc)
    return targets


class TargetResolver:
    """Map repositories to destination targets.

    Resolution depends only on the repository, the configuration, and the
    organization map; the only lookups issued are for the starred and the
    default organization.
    """

    def __init__(
        self,
        destination: GiteaDestination,
        config: MirrorConfig,
        default_user: Target,
        organization_targets: cabc.Mapping[str, Target],
    ) -> None:
        """Initialise the resolver with the run's pre-resolved targets."""
        self._destination = destination
        self._config = config
        self._default_user = default_user
        self._organization_targets = organization_targets
        self._rules: tuple[TargetRule, ...] = (
            self.starred_organization_rule,
            self.organization_structure_rule,
            self.default_rule,
        )

    async def resolve(self, repo: Repository) -> Target:
        """Return the target of the first rule that applies."""
        for rule in self._rules:
            target = await rule(repo)
            if target is not None:
                return target
        return self._default_user

    async def starred_organization_rule(self, repo: Repository) -> Target | None:
        """Route starred repositories to the starred-repositories organization."""
        organization = self._config.gitea.starred_repos_org
        if not repo.starred or not organization:
            return None

        try:
            target = await self._lookup(organization)
        except TargetResolutionError as exc:
            log_warning(
                logger,
                'Could not find organization "%s" for starred repositories, '
                "using default target: %s",
                organization,
                exc.reason,
            )
            return await self.default_rule(repo)

        log_info(
            logger,
            'Using organization "%s" for starred repository: %s',
            organization,
            repo.name,
        )
        return target

    async def organization_structure_rule(self, repo: Repository) -> Target | None:
        """Route organization repositories to their like-named organization."""
        if not self._config.github.preserve_org_structure or not repo.organization:
            return None

        target = self._organization_targets.get(repo.organization)
        if target is None:
            log_warning(
                logger,
                "No Gitea organization found for %s, using default target",
                repo.organization,
            )
            return await self.default_rule(repo)
        return target

    async def default_rule(self, repo: Repository) -> Target:
        """Use the configured organization, or the destination user."""
        del repo
        organization = self._config.gitea.organization
        if not organization:
            return self._default_user

        try:
            return await self._lookup(organization)
        except TargetResolutionError as exc:
            log_warning(
                logger,
                "Failed to get Gitea organization %s, using user instead: %s",
                organization,
                exc.reason,
            )
            return self._default_user

    async def _lookup(self, organization: str) -> Target:
        try:
            return await self._destination.get_organization(organization)
        except GiteaAPIError as exc:
            raise TargetResolutionError(organization, str(exc)) from exc
