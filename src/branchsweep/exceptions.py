"""Exception types raised by branchsweep."""

from typing import Dict, Iterable, List, Optional


class BranchSweepError(Exception):
    """Base class for all branchsweep errors."""

    pass


class AuthenticationMissing(BranchSweepError):
    """Raised when no bearer credential was supplied for a request."""

    def __init__(self, message: str = "No authentication token provided"):
        super().__init__(message)


class RemoteAPIError(BranchSweepError):
    """Raised when the remote hosting API returns an unexpected response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PaginationLimitExceeded(BranchSweepError):
    """Raised when a listing still has pages left after the page ceiling."""

    def __init__(self, resource: str, max_pages: int, fetched: int):
        super().__init__(
            f"Listing {resource} stopped after {max_pages} pages "
            f"({fetched} items); more results exist upstream"
        )
        self.resource = resource
        self.max_pages = max_pages
        self.fetched = fetched


class ConflictCheckFailed(BranchSweepError):
    """Raised when an archive tag existence lookup errored.

    The whole batch is blocked; no mutation has been attempted.
    """

    def __init__(
        self,
        branches: Iterable[str],
        cause: Exception,
        failed_branch: Optional[str] = None,
    ):
        self.branches: List[str] = list(branches)
        self.cause = cause
        self.failed_branch = failed_branch
        super().__init__(
            f"Could not verify archive tags for branches: "
            f"{', '.join(self.branches)} ({cause})"
        )


class TagCollision(BranchSweepError):
    """Raised when archive tags already exist for some of the requested branches."""

    def __init__(self, conflicts: Iterable[str]):
        self.conflicts: List[str] = list(conflicts)
        super().__init__(
            f"Cannot process: Tags already exist for branches: "
            f"{', '.join(self.conflicts)}"
        )


class AmbiguousTagNameError(BranchSweepError, ValueError):
    """Raised when several branches in one batch derive the same archive tag name."""

    def __init__(self, collisions: Dict[str, List[str]]):
        self.collisions = collisions
        groups = "; ".join(
            f"{tag} <- {', '.join(branches)}" for tag, branches in collisions.items()
        )
        super().__init__(f"Branches map to the same archive tag: {groups}")


class BatchInProgress(BranchSweepError):
    """Raised when a request overlaps branches of a batch that is still executing."""

    def __init__(self, repository: str, branches: Iterable[str]):
        self.repository = repository
        self.branches: List[str] = list(branches)
        super().__init__(
            f"Branches already being processed in {repository}: "
            f"{', '.join(self.branches)}"
        )


class ConfirmationMismatch(BranchSweepError):
    """Raised when the typed confirmation phrase does not match the pending operation."""

    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"Please type '{expected}' to confirm")


class ProtectedBranchError(BranchSweepError, ValueError):
    """Raised when selecting a protected branch."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' is protected and cannot be selected")
