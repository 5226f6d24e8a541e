"""Mirror workflow: target resolution, mirror creation, and issue replication."""

from __future__ import annotations

from .issues import IssueReplicationResult, IssueReplicator, format_issue_body
from .orchestrator import MirrorOrchestrator
from .outcomes import (
    MirrorAction,
    MirrorOutcome,
    MirrorState,
    RunSummary,
    SideEffectResult,
    SideEffectStatus,
)
from .targets import TargetResolver, ensure_organization, prepare_organization_targets

__all__ = [
    "IssueReplicationResult",
    "IssueReplicator",
    "MirrorAction",
    "MirrorOrchestrator",
    "MirrorOutcome",
    "MirrorState",
    "RunSummary",
    "SideEffectResult",
    "SideEffectStatus",
    "TargetResolver",
    "ensure_organization",
    "format_issue_body",
    "prepare_organization_targets",
]
