"""Result types for per-repository mirror work.

A repository either fails (the mirror could not be checked or created) or
succeeds; starring and issue replication report through
:class:`SideEffectResult`, which can warn but never turn a success into a
failure.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from gitea_mirror.errors import MirrorCreateError, MirrorError
    from gitea_mirror.gitea.models import Target


class MirrorState(enum.StrEnum):
    """Destination state observed before acting on a repository."""

    ABSENT = "absent"
    MIRRORED = "mirrored"


class MirrorAction(enum.StrEnum):
    """What the orchestrator did for a repository."""

    CREATED = "created"
    STARRED = "starred"
    NOOP = "noop"
    DRY_RUN = "dry_run"
    FAILED = "failed"


class SideEffectStatus(enum.StrEnum):
    """Outcome of a best-effort follow-up action."""

    OK = "ok"
    SKIPPED = "skipped"
    WARNED = "warned"


@dataclasses.dataclass(frozen=True, slots=True)
class SideEffectResult:
    """Outcome of starring or issue replication for one repository."""

    name: str
    status: SideEffectStatus
    detail: str = ""
    error: MirrorError | None = None

    @classmethod
    def ok(cls, name: str, detail: str = "") -> SideEffectResult:
        """Return a successful side effect."""
        return cls(name=name, status=SideEffectStatus.OK, detail=detail)

    @classmethod
    def skipped(cls, name: str, detail: str) -> SideEffectResult:
        """Return a side effect that was intentionally not performed."""
        return cls(name=name, status=SideEffectStatus.SKIPPED, detail=detail)

    @classmethod
    def warned(cls, name: str, error: MirrorError) -> SideEffectResult:
        """Return a side effect that failed without failing the repository."""
        return cls(
            name=name,
            status=SideEffectStatus.WARNED,
            detail=str(error),
            error=error,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class MirrorOutcome:
    """Result of mirroring one repository."""

    repository: str
    target: Target
    action: MirrorAction
    state: MirrorState | None = None
    side_effects: tuple[SideEffectResult, ...] = ()
    error: MirrorCreateError | None = None

    @classmethod
    def failed(
        cls,
        repository: str,
        target: Target,
        error: MirrorCreateError,
        *,
        state: MirrorState | None = None,
    ) -> MirrorOutcome:
        """Return an outcome for a repository whose mirror step failed."""
        return cls(
            repository=repository,
            target=target,
            action=MirrorAction.FAILED,
            state=state,
            error=error,
        )

    @property
    def succeeded(self) -> bool:
        """Return True unless the mirror step itself failed."""
        return self.action is not MirrorAction.FAILED

    @property
    def warnings(self) -> tuple[SideEffectResult, ...]:
        """Return the side effects that ended in a warning."""
        return tuple(
            effect
            for effect in self.side_effects
            if effect.status is SideEffectStatus.WARNED
        )


@dataclasses.dataclass(slots=True)
class RunSummary:
    """Counters for one complete mirror run."""

    repositories_found: int = 0
    created: int = 0
    starred: int = 0
    unchanged: int = 0
    dry_run: int = 0
    failed: int = 0
    warnings: int = 0

    def record(self, outcome: MirrorOutcome) -> None:
        """Count an outcome under its action."""
        match outcome.action:
            case MirrorAction.CREATED:
                self.created += 1
            case MirrorAction.STARRED:
                self.starred += 1
            case MirrorAction.NOOP:
                self.unchanged += 1
            case MirrorAction.DRY_RUN:
                self.dry_run += 1
            case MirrorAction.FAILED:
                self.failed += 1
        self.warnings += len(outcome.warnings)
