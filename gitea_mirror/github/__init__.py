"""GitHub source API client and payload models."""

from __future__ import annotations

from .client import GitHubConfig, GitHubRestClient, GitHubSourceClient
from .errors import GitHubAPIError, GitHubResponseShapeError
from .models import GitHubIssue

__all__ = [
    "GitHubAPIError",
    "GitHubConfig",
    "GitHubIssue",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubSourceClient",
]
