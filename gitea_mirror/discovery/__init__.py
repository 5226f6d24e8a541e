"""Repository discovery: collection from the source account and filtering.

Usage
-----
Collect and filter repositories for a run::

    from gitea_mirror.discovery import collect_repositories, filter_repositories

    repos = await collect_repositories(github_client, config.fetch_options())
    repos = filter_repositories(repos, config.include, config.exclude)

"""

from gitea_mirror.discovery.collector import collect_repositories
from gitea_mirror.discovery.filters import (
    deduplicate,
    filter_repositories,
    matches_any,
    without_forks,
)
from gitea_mirror.discovery.models import FetchOptions, Repository

__all__ = [
    "FetchOptions",
    "Repository",
    "collect_repositories",
    "deduplicate",
    "filter_repositories",
    "matches_any",
    "without_forks",
]
