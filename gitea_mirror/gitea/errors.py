"""Gitea destination API errors."""

from __future__ import annotations


class GiteaAPIError(RuntimeError):
    """Raised when Gitea rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def unexpected_status(cls, action: str, status_code: int) -> GiteaAPIError:
        """Return an error for a response with an unexpected status."""
        return cls(f"failed to {action}: status {status_code}", status_code=status_code)

    @classmethod
    def transport_error(cls, action: str, reason: str) -> GiteaAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"failed to {action}: {reason}")

    @classmethod
    def invalid_response(cls, action: str, reason: str) -> GiteaAPIError:
        """Return an error for a response body that failed decoding."""
        return cls(f"failed to {action}: unexpected response ({reason})")
