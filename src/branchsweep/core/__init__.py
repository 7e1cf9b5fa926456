"""Branch lifecycle core for branchsweep."""

from branchsweep.core.conflicts import ConflictDetector
from branchsweep.core.orchestrator import (
    LifecycleOrchestrator,
    OrchestratorState,
    InFlightRegistry,
)
from branchsweep.core.confirmation import (
    ConfirmationGate,
    authorize,
    confirmation_phrase,
    ensure_authorized,
    requires_confirmation,
)
from branchsweep.core.reporter import Summary, WorkingSet, prune, summarize
from branchsweep.core.service import BranchSweeper

__all__ = [
    "ConflictDetector",
    "LifecycleOrchestrator",
    "OrchestratorState",
    "InFlightRegistry",
    "ConfirmationGate",
    "authorize",
    "confirmation_phrase",
    "ensure_authorized",
    "requires_confirmation",
    "Summary",
    "WorkingSet",
    "prune",
    "summarize",
    "BranchSweeper",
]
