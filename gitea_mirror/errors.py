"""Error taxonomy for mirror runs.

Fatal errors (``ConfigurationError``, ``SourceFetchError``) abort a run.
Every other error is recovered where it is raised: the failing organization,
repository, issue, or label is logged and the run moves on.
"""

from __future__ import annotations


class MirrorError(Exception):
    """Base class for mirror run errors."""


class ConfigurationError(MirrorError):
    """Raised when run configuration is missing or invalid."""

    @classmethod
    def missing(cls, variable: str) -> ConfigurationError:
        """Return an error for a mandatory environment variable."""
        return cls(f"invalid configuration, please provide {variable}")

    @classmethod
    def token_required_for_private(cls) -> ConfigurationError:
        """Return an error when private mirroring lacks a GitHub token."""
        return cls(
            "invalid configuration, mirroring private repositories requires "
            "setting GITHUB_TOKEN"
        )

    @classmethod
    def token_required_for_features(cls) -> ConfigurationError:
        """Return an error when token-only features lack a GitHub token."""
        return cls(
            "invalid configuration, mirroring issues, starred repositories, "
            "organizations, or a single repo requires setting GITHUB_TOKEN"
        )

    @classmethod
    def invalid_repository(cls, token: str) -> ConfigurationError:
        """Return an error for a malformed single-repository reference."""
        return cls(f"invalid repository URL format: {token}")


class SourceFetchError(MirrorError):
    """Raised when an owned, private, or starred listing cannot be fetched."""

    def __init__(self, collection: str, reason: str) -> None:
        """Initialise with the failing collection and failure reason."""
        self.collection = collection
        self.reason = reason
        super().__init__(f"failed to fetch {collection} repositories: {reason}")


class OrganizationFetchError(MirrorError):
    """Raised when one organization's repository listing fails."""

    def __init__(self, organization: str, reason: str) -> None:
        """Initialise with the organization name and failure reason."""
        self.organization = organization
        self.reason = reason
        super().__init__(
            f"error fetching repositories for org {organization}: {reason}"
        )


class TargetResolutionError(MirrorError):
    """Raised when a destination organization cannot be resolved."""

    def __init__(self, organization: str, reason: str) -> None:
        """Initialise with the organization name and failure reason."""
        self.organization = organization
        self.reason = reason
        super().__init__(f"failed to get Gitea organization {organization}: {reason}")


class MirrorCreateError(MirrorError):
    """Raised when a mirror cannot be checked or created at the destination."""

    def __init__(self, repository: str, reason: str) -> None:
        """Initialise with the repository name and failure reason."""
        self.repository = repository
        self.reason = reason
        super().__init__(f"failed to mirror repository {repository}: {reason}")


class StarError(MirrorError):
    """Raised when starring a mirrored repository fails."""

    def __init__(self, repository: str, reason: str) -> None:
        """Initialise with the ``owner/name`` slug and failure reason."""
        self.repository = repository
        self.reason = reason
        super().__init__(f"failed to star repository {repository}: {reason}")


class IssueFetchError(MirrorError):
    """Raised when source issues cannot be listed."""

    def __init__(self, repository: str, reason: str) -> None:
        """Initialise with the ``owner/name`` slug and failure reason."""
        self.repository = repository
        self.reason = reason
        super().__init__(f"error fetching issues for {repository}: {reason}")


class IssueCreateError(MirrorError):
    """Raised when an issue cannot be created at the destination."""

    def __init__(self, title: str, reason: str) -> None:
        """Initialise with the issue title and failure reason."""
        self.title = title
        self.reason = reason
        super().__init__(f"error creating issue {title!r}: {reason}")


class LabelError(MirrorError):
    """Raised when a label cannot be created or attached."""

    def __init__(self, label: str, reason: str) -> None:
        """Initialise with the label name and failure reason."""
        self.label = label
        self.reason = reason
        super().__init__(f"error adding label {label} to issue: {reason}")
