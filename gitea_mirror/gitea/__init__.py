"""Gitea destination API client and request models."""

from __future__ import annotations

from .client import GiteaClient, GiteaConfig, GiteaDestination
from .errors import GiteaAPIError
from .models import (
    CreateIssueRequest,
    CreateLabelRequest,
    CreateOrganizationRequest,
    IssueLabelsRequest,
    MigrateRepositoryRequest,
    Target,
    TargetKind,
)

__all__ = [
    "CreateIssueRequest",
    "CreateLabelRequest",
    "CreateOrganizationRequest",
    "GiteaAPIError",
    "GiteaClient",
    "GiteaConfig",
    "GiteaDestination",
    "IssueLabelsRequest",
    "MigrateRepositoryRequest",
    "Target",
    "TargetKind",
]
