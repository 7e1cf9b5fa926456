"""High level entry point used by the API and the CLI."""

import logging
from typing import Optional

from branchsweep.config import SweepConfig
from branchsweep.core.confirmation import ensure_authorized
from branchsweep.core.orchestrator import LifecycleOrchestrator
from branchsweep.core.reporter import WorkingSet
from branchsweep.exceptions import AuthenticationMissing
from branchsweep.models import (
    BatchResult,
    Branch,
    OperationRequest,
    Repository,
    RepositoryRef,
    Tag,
)
from branchsweep.remote.client import Listing, RepositoryClient

logger = logging.getLogger(__name__)


class BranchSweeper:
    """Wires the remote client, confirmation gate and orchestrator together."""

    def __init__(self, client: RepositoryClient, max_workers: int = 8):
        """Initialize the sweeper.

        Args:
            client: Remote client shared by all requests
            max_workers: Concurrency bound handed to each orchestrator
        """
        self.client = client
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: SweepConfig) -> "BranchSweeper":
        return cls(RepositoryClient.from_config(config), max_workers=config.max_workers)

    def list_repositories(self, token: str) -> Listing[Repository]:
        return self.client.list_repositories(token)

    def list_branches(self, repo: RepositoryRef, token: str) -> Listing[Branch]:
        return self.client.list_branches(repo, token)

    def list_tags(self, repo: RepositoryRef, token: str) -> Listing[Tag]:
        return self.client.list_tags(repo, token)

    def load_working_set(self, repo: RepositoryRef, token: str) -> WorkingSet:
        """Fetch branches into a fresh working set with nothing selected."""
        listing = self.list_branches(repo, token)
        if listing.truncated:
            logger.warning(
                f"Only the first {len(listing)} branches of {repo} are available"
            )
        return WorkingSet(listing.items)

    def process(
        self,
        repo: RepositoryRef,
        request: OperationRequest,
        token: str,
        confirmation: Optional[str] = None,
    ) -> BatchResult:
        """Run ``request`` once its confirmation (if required) checks out.

        Raises:
            AuthenticationMissing: If ``token`` is empty
            ConfirmationMismatch: If a destructive mode was not confirmed
            BranchSweepError: Any batch-fatal error raised by the orchestrator
        """
        if not token:
            raise AuthenticationMissing()

        ensure_authorized(request.mode, confirmation)

        orchestrator = LifecycleOrchestrator(self.client, max_workers=self.max_workers)
        return orchestrator.run(repo, request, token)
