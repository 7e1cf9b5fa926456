"""Archive tag conflict detection."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Set

from branchsweep.exceptions import ConflictCheckFailed
from branchsweep.models import RepositoryRef
from branchsweep.remote.client import RepositoryClient
from branchsweep.utils.tag_names import derive_tag_name

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Finds branches whose archive tag already exists upstream."""

    def __init__(self, client: RepositoryClient, max_workers: int = 8):
        """Initialize the detector.

        Args:
            client: Remote client used for tag lookups
            max_workers: Upper bound on concurrent lookups
        """
        self.client = client
        self.max_workers = max_workers

    def detect(
        self,
        repo: RepositoryRef,
        branches: Iterable[str],
        tag_prefix: str,
        token: str,
    ) -> Set[str]:
        """Return the subset of ``branches`` that already have an archive tag.

        All lookups run concurrently and are joined together; the first failing
        lookup fails the whole call and pending lookups are cancelled.

        Raises:
            ConflictCheckFailed: If any lookup errored
        """
        branches = list(branches)
        if not branches:
            return set()

        conflicts: Set[str] = set()
        workers = max(1, min(self.max_workers, len(branches)))
        logger.info(
            f"Checking {len(branches)} archive tags under '{tag_prefix}' in {repo}"
        )

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(
                    self.client.tag_exists,
                    repo,
                    derive_tag_name(branch, tag_prefix),
                    token,
                ): branch
                for branch in branches
            }
            for future in as_completed(futures):
                branch = futures[future]
                try:
                    exists = future.result()
                except Exception as e:
                    for pending in futures:
                        pending.cancel()
                    logger.error(f"Tag lookup for branch '{branch}' failed: {e}")
                    raise ConflictCheckFailed(branches, e, failed_branch=branch) from e

                if exists:
                    logger.debug(
                        f"Archive tag {derive_tag_name(branch, tag_prefix)} exists"
                    )
                    conflicts.add(branch)

        return conflicts
