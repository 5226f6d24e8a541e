"""One complete mirror run.

A run ensures the configured destination organizations exist, collects and
filters source repositories, resolves a target for each, and mirrors them
one at a time. Configuration and source enumeration failures abort the run;
per-repository failures are logged and counted.
"""

from __future__ import annotations

import typing as typ

from gitea_mirror.discovery import collect_repositories, filter_repositories
from gitea_mirror.gitea import GiteaAPIError, GiteaClient, GiteaConfig
from gitea_mirror.github import GitHubConfig, GitHubRestClient
from gitea_mirror.logging import get_logger, log_error, log_info, log_warning
from gitea_mirror.mirror import (
    IssueReplicator,
    MirrorOrchestrator,
    RunSummary,
    TargetResolver,
    ensure_organization,
    prepare_organization_targets,
)

if typ.TYPE_CHECKING:
    from gitea_mirror.config import MirrorConfig
    from gitea_mirror.gitea import GiteaDestination
    from gitea_mirror.github import GitHubSourceClient

logger = get_logger(__name__)


async def _ensure_configured_organizations(
    destination: GiteaDestination, config: MirrorConfig
) -> None:
    names: list[str] = []
    if config.gitea.organization:
        names.append(config.gitea.organization)
    if config.github.mirror_starred and config.gitea.starred_repos_org:
        names.append(config.gitea.starred_repos_org)

    for name in dict.fromkeys(names):
        try:
            await ensure_organization(
                destination, name, config.gitea.visibility, dry_run=config.dry_run
            )
        except GiteaAPIError as exc:
            log_warning(logger, "Error creating Gitea organization %s: %s", name, exc)


async def run_once(
    config: MirrorConfig,
    *,
    source: GitHubSourceClient,
    destination: GiteaDestination,
) -> RunSummary:
    """Mirror every selected repository once.

    Parameters
    ----------
    config : MirrorConfig
        Snapshot of the run configuration.
    source : GitHubSourceClient
        Source API used for discovery and issue reads.
    destination : GiteaDestination
        Destination API used for every mutation.

    Returns
    -------
    RunSummary
        Per-action counters for the run.

    Raises
    ------
    ConfigurationError
        If the single-repository reference is malformed.
    SourceFetchError
        If a source enumeration fails.
    GiteaAPIError
        If the authenticated destination user cannot be resolved.

    """
    await _ensure_configured_organizations(destination, config)

    repositories = await collect_repositories(source, config.fetch_options())
    repositories = filter_repositories(repositories, config.include, config.exclude)
    log_info(logger, "Found %d repositories to mirror", len(repositories))

    summary = RunSummary(repositories_found=len(repositories))
    user = await destination.get_user()
    organization_targets = await prepare_organization_targets(
        destination, config, repositories
    )
    resolver = TargetResolver(destination, config, user, organization_targets)
    orchestrator = MirrorOrchestrator(
        destination,
        config,
        IssueReplicator(source, destination, dry_run=config.dry_run),
    )

    for repo in repositories:
        target = await resolver.resolve(repo)
        outcome = await orchestrator.mirror(repo, target)
        summary.record(outcome)
        if outcome.error is not None:
            log_error(
                logger,
                "Error mirroring repository %s: %s",
                repo.name,
                outcome.error,
            )

    log_info(
        logger,
        "Mirroring process completed: %d created, %d starred, %d unchanged, "
        "%d planned, %d failed, %d warnings",
        summary.created,
        summary.starred,
        summary.unchanged,
        summary.dry_run,
        summary.failed,
        summary.warnings,
    )
    return summary


async def execute(config: MirrorConfig) -> RunSummary:
    """Build the API clients for ``config`` and perform one run."""
    source = GitHubRestClient(GitHubConfig(token=config.github.token))
    destination = GiteaClient(
        GiteaConfig(url=config.gitea.url, token=config.gitea.token)
    )
    try:
        return await run_once(config, source=source, destination=destination)
    finally:
        await source.aclose()
        await destination.aclose()
