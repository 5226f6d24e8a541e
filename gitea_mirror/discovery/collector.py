"""Source collection: gather repositories from every enabled mode.

Modes are collected in a fixed order (owned public, owned private, starred,
organizations) and deduplicated by clone URL keeping the first record seen,
so an owned repository that is also starred keeps its owned (unstarred)
record. Single-repository mode bypasses every other mode and deduplication.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from gitea_mirror.common.slug import parse_single_repo
from gitea_mirror.errors import (
    ConfigurationError,
    OrganizationFetchError,
    SourceFetchError,
)
from gitea_mirror.github.errors import GitHubAPIError, GitHubResponseShapeError
from gitea_mirror.logging import get_logger, log_error, log_info

from .filters import deduplicate, select_organizations, without_forks

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from gitea_mirror.github.client import GitHubSourceClient

    from .models import FetchOptions, Repository

logger = get_logger(__name__)

_SOURCE_ERRORS = (GitHubAPIError, GitHubResponseShapeError)


async def _drain(
    collection: str, iterator: cabc.AsyncIterator[Repository]
) -> list[Repository]:
    """Collect a paginated listing, converting failures to SourceFetchError."""
    try:
        return [repo async for repo in iterator]
    except _SOURCE_ERRORS as exc:
        raise SourceFetchError(collection, str(exc)) from exc


async def fetch_single_repository(
    client: GitHubSourceClient, token: str
) -> Repository:
    """Fetch the repository named by an ``owner/name`` or URL token.

    Raises
    ------
    ConfigurationError
        If the token is not a valid repository reference.
    SourceFetchError
        If the repository cannot be fetched.

    """
    try:
        owner, name = parse_single_repo(token)
    except ValueError as exc:
        raise ConfigurationError.invalid_repository(token) from exc

    try:
        return await client.get_repository(owner, name)
    except _SOURCE_ERRORS as exc:
        raise SourceFetchError(f"single repository {token}", str(exc)) from exc


async def fetch_organization_repositories(
    client: GitHubSourceClient, options: FetchOptions
) -> list[Repository]:
    """Collect repositories of every selected organization.

    A failing organization is logged and skipped; failing to enumerate the
    organizations at all is fatal.
    """
    username = options.username if options.use_specific_user else None
    try:
        names = [name async for name in client.iter_organizations(username)]
    except _SOURCE_ERRORS as exc:
        raise SourceFetchError("organization", str(exc)) from exc

    selected = select_organizations(names, options.include_orgs, options.exclude_orgs)
    log_info(logger, "Processing repositories from %d organizations", len(selected))

    collected: list[Repository] = []
    for organization in selected:
        try:
            repos = await _fetch_one_organization(client, organization, options)
        except OrganizationFetchError as exc:
            log_error(logger, "%s", exc)
            continue
        collected.extend(repos)
    return collected


async def _fetch_one_organization(
    client: GitHubSourceClient, organization: str, options: FetchOptions
) -> list[Repository]:
    log_info(logger, "Fetching repositories for organization: %s", organization)
    if options.private_repositories:
        iterator = client.iter_search_organization_repositories(organization)
        visibility = "public and private"
    else:
        iterator = client.iter_organization_repositories(organization)
        visibility = "public"

    try:
        repos = [repo async for repo in iterator]
    except _SOURCE_ERRORS as exc:
        raise OrganizationFetchError(organization, str(exc)) from exc

    log_info(
        logger,
        "Found %d %s repositories for org: %s",
        len(repos),
        visibility,
        organization,
    )
    if options.preserve_org_structure:
        repos = [dataclasses.replace(repo, organization=organization) for repo in repos]
    return repos


async def collect_repositories(
    client: GitHubSourceClient, options: FetchOptions
) -> list[Repository]:
    """Produce the deduplicated repository set for the enabled modes.

    Raises
    ------
    ConfigurationError
        If the single-repository token is malformed.
    SourceFetchError
        If an owned, private, starred, or organization enumeration fails.

    """
    if options.single_repo:
        repositories = [await fetch_single_repository(client, options.single_repo)]
    else:
        repositories = await _collect_all_modes(client, options)

    if options.skip_forks:
        repositories = without_forks(repositories)
    return repositories


async def _collect_all_modes(
    client: GitHubSourceClient, options: FetchOptions
) -> list[Repository]:
    collected = await _drain(
        "public", client.iter_user_repositories(options.username)
    )

    if options.private_repositories:
        collected += await _drain(
            "private", client.iter_owned_private_repositories()
        )

    if options.mirror_starred:
        username = options.username if options.use_specific_user else None
        collected += await _drain(
            "starred", client.iter_starred_repositories(username)
        )

    if options.mirror_organizations:
        collected += await fetch_organization_repositories(client, options)

    return deduplicate(collected)
