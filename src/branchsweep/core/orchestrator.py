"""Branch lifecycle orchestration.

Sequences conflict detection, tag creation and branch deletion for one
``OperationRequest`` and reports one ``BranchOutcome`` per branch.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from branchsweep.core.conflicts import ConflictDetector
from branchsweep.exceptions import (
    AmbiguousTagNameError,
    AuthenticationMissing,
    BatchInProgress,
    ConflictCheckFailed,
    TagCollision,
)
from branchsweep.models import (
    BatchResult,
    BranchOutcome,
    OperationRequest,
    RepositoryRef,
)
from branchsweep.remote.client import RepositoryClient
from branchsweep.utils.tag_names import derive_tag_name, find_tag_name_collisions

logger = logging.getLogger(__name__)

CANCELLED_ERROR = "cancelled before processing"
PROTECTED_ERROR = "branch is protected"


class OrchestratorState(str, Enum):
    """Lifecycle of one request."""

    IDLE = "idle"
    CONFLICT_CHECKING = "conflict_checking"
    BLOCKED = "blocked"
    EXECUTING = "executing"
    COMPLETED = "completed"


class InFlightRegistry:
    """Tracks branches claimed by running batches, per repository."""

    def __init__(self):
        self._lock = threading.Lock()
        self._claimed: Dict[str, Set[str]] = {}

    def claim(self, repo: RepositoryRef, branches: Iterable[str]) -> None:
        """Claim ``branches`` for a batch.

        Raises:
            BatchInProgress: If any branch is already claimed in ``repo``
        """
        branches = list(branches)
        with self._lock:
            claimed = self._claimed.setdefault(repo.full_name, set())
            overlap = [b for b in branches if b in claimed]
            if overlap:
                raise BatchInProgress(repo.full_name, overlap)
            claimed.update(branches)

    def release(self, repo: RepositoryRef, branches: Iterable[str]) -> None:
        with self._lock:
            claimed = self._claimed.get(repo.full_name)
            if claimed is None:
                return
            claimed.difference_update(branches)
            if not claimed:
                del self._claimed[repo.full_name]

    def is_claimed(self, repo: RepositoryRef, branch: str) -> bool:
        with self._lock:
            return branch in self._claimed.get(repo.full_name, set())


# Shared by every orchestrator in the process
in_flight = InFlightRegistry()


class LifecycleOrchestrator:
    """Runs one batch of branch archive/delete work.

    ``run`` either raises a batch-fatal error before any mutation (missing
    credential, ambiguous tag names, tag collision, failed conflict check,
    overlapping batch) or returns a ``BatchResult`` in which each branch
    succeeded or failed independently.
    """

    def __init__(
        self,
        client: RepositoryClient,
        detector: Optional[ConflictDetector] = None,
        max_workers: int = 8,
        registry: Optional[InFlightRegistry] = None,
    ):
        """Initialize the orchestrator.

        Args:
            client: Remote client used for tag and ref mutations
            detector: Conflict detector (defaults to one sharing ``client``)
            max_workers: Upper bound on branches processed concurrently
            registry: In-flight registry (defaults to the process-wide one)
        """
        self.client = client
        self.detector = detector or ConflictDetector(client, max_workers=max_workers)
        self.max_workers = max_workers
        self.registry = registry or in_flight
        self.state = OrchestratorState.IDLE
        self.conflicts: List[str] = []
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop starting new branches. Branches already started run to completion.

        Applies to the running batch, or to the next one when called between
        runs; it is cleared once that batch ends.
        """
        if not self._cancelled.is_set():
            logger.warning("Cancellation requested; no new branches will be started")
        self._cancelled.set()

    def run(
        self, repo: RepositoryRef, request: OperationRequest, token: str
    ) -> BatchResult:
        """Process ``request`` against ``repo``.

        Raises:
            AuthenticationMissing: If ``token`` is empty
            AmbiguousTagNameError: If two requested branches derive the same tag
            BatchInProgress: If another batch is working on some of the branches
            ConflictCheckFailed: If an archive tag lookup errored
            TagCollision: If archive tags already exist for some branches
        """
        if self.state in (
            OrchestratorState.CONFLICT_CHECKING,
            OrchestratorState.EXECUTING,
        ):
            raise RuntimeError("Orchestrator is already running a batch")

        self.state = OrchestratorState.IDLE
        self.conflicts = []

        if not token:
            raise AuthenticationMissing()

        mode = request.mode
        if mode.archives:
            collisions = find_tag_name_collisions(request.branches, request.tag_prefix)
            if collisions:
                raise AmbiguousTagNameError(collisions)

        if self._cancelled.is_set():
            self._cancelled.clear()
            self.state = OrchestratorState.COMPLETED
            logger.warning(f"Batch cancelled before start; {repo} left untouched")
            return BatchResult(
                results=[
                    BranchOutcome(branch=branch, error=CANCELLED_ERROR)
                    for branch in request.branches
                ]
            )

        self.registry.claim(repo, request.branches)
        try:
            if mode.archives:
                self._check_conflicts(repo, request, token)
            else:
                logger.info("Delete-only batch; skipping archive tag checks")

            self.state = OrchestratorState.EXECUTING
            logger.info(
                f"Processing {len(request.branches)} branches in {repo} ({mode.value})"
            )
            result = self._execute(repo, request, token)
            self.state = OrchestratorState.COMPLETED
            logger.info(
                f"Batch complete: {len(result.successes)} succeeded, "
                f"{len(result.failures)} failed"
            )
            return result
        finally:
            self.registry.release(repo, request.branches)
            self._cancelled.clear()

    def _check_conflicts(
        self, repo: RepositoryRef, request: OperationRequest, token: str
    ) -> None:
        self.state = OrchestratorState.CONFLICT_CHECKING
        try:
            found = self.detector.detect(
                repo, request.branches, request.tag_prefix, token
            )
        except ConflictCheckFailed:
            self.state = OrchestratorState.BLOCKED
            raise

        if found:
            self.conflicts = [b for b in request.branches if b in found]
            self.state = OrchestratorState.BLOCKED
            logger.warning(
                f"Batch blocked, archive tags exist for: {', '.join(self.conflicts)}"
            )
            raise TagCollision(self.conflicts)

    def _execute(
        self, repo: RepositoryRef, request: OperationRequest, token: str
    ) -> BatchResult:
        workers = max(1, min(self.max_workers, len(request.branches)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._process_branch, repo, branch, request, token)
                for branch in request.branches
            ]
            # Collected in submission order, not completion order
            outcomes = [future.result() for future in futures]

        return BatchResult(results=outcomes)

    def _process_branch(
        self,
        repo: RepositoryRef,
        branch: str,
        request: OperationRequest,
        token: str,
    ) -> BranchOutcome:
        if self._cancelled.is_set():
            return BranchOutcome(branch=branch, error=CANCELLED_ERROR)

        # Protection is read from the live branch, not the caller's listing
        try:
            head = self.client.get_branch(repo, branch, token)
        except Exception as e:
            logger.error(f"Failed to fetch branch '{branch}': {e}")
            return BranchOutcome(branch=branch, error=str(e))

        if head.protected:
            logger.warning(f"Refusing to archive or delete protected branch '{branch}'")
            return BranchOutcome(branch=branch, error=PROTECTED_ERROR)

        archived = False
        if request.mode.archives:
            tag_name = derive_tag_name(branch, request.tag_prefix)
            try:
                self.client.create_tag(repo, tag_name, head.commit_sha, token)
            except Exception as e:
                logger.error(f"Failed to archive branch '{branch}' as {tag_name}: {e}")
                return BranchOutcome(branch=branch, error=str(e))
            archived = True

        if request.mode.deletes:
            try:
                self.client.delete_branch_ref(repo, branch, token)
            except Exception as e:
                logger.error(f"Failed to delete branch '{branch}': {e}")
                return BranchOutcome(branch=branch, archived=archived, error=str(e))
            return BranchOutcome(
                branch=branch, archived=archived, deleted=True, success=True
            )

        return BranchOutcome(branch=branch, archived=archived, success=True)
