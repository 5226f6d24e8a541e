"""GitHub source API errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, url: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"GitHub HTTP {status_code} for {url}", status_code=status_code)

    @classmethod
    def transport_error(cls, url: str, reason: str) -> GitHubAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"GitHub request to {url} failed: {reason}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses do not have the expected structure."""

    @classmethod
    def invalid(cls, url: str, reason: str) -> GitHubResponseShapeError:
        """Return an error for a response that failed decoding."""
        return cls(f"GitHub response from {url} has unexpected shape: {reason}")
