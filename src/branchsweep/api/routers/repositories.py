"""Repositories router for the branchsweep API."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from branchsweep.api.auth import get_sweeper, require_token
from branchsweep.core.service import BranchSweeper
from branchsweep.exceptions import (
    AmbiguousTagNameError,
    AuthenticationMissing,
    BatchInProgress,
    ConfirmationMismatch,
    ConflictCheckFailed,
    RemoteAPIError,
    TagCollision,
)
from branchsweep.models import (
    Branch,
    BranchOutcome,
    OperationMode,
    OperationRequest,
    Repository,
    RepositoryRef,
    Tag,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Upstream statuses worth passing through to the caller as-is
PASSTHROUGH_STATUSES = {401, 403, 404}


class RepositoryListing(BaseModel):
    """Repositories visible to the caller."""

    items: List[Repository]
    truncated: bool = False


class BranchListing(BaseModel):
    """Branches of a repository."""

    items: List[Branch]
    truncated: bool = False


class TagListing(BaseModel):
    """Tags of a repository."""

    items: List[Tag]
    truncated: bool = False


class ArchiveRequest(BaseModel):
    """Request to archive and/or delete branches."""

    model_config = ConfigDict(populate_by_name=True)

    branches: List[str]
    operation: OperationMode = OperationMode.ARCHIVE_ONLY
    tag_prefix: str = Field(default="archive", alias="tagPrefix")
    confirmation: Optional[str] = Field(
        default=None,
        description="Confirmation phrase, required for deleting operations",
    )


class ArchiveResponse(BaseModel):
    """Per-branch outcomes in request order."""

    results: List[BranchOutcome]


def _repo(owner: str, name: str) -> RepositoryRef:
    try:
        return RepositoryRef(owner=owner, name=name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _remote_error(e: RemoteAPIError) -> HTTPException:
    status = e.status_code if e.status_code in PASSTHROUGH_STATUSES else 502
    return HTTPException(
        status_code=status,
        detail={"error": "Remote API error", "message": str(e), "details": e.detail},
    )


@router.get("/", response_model=RepositoryListing)
def list_repositories(
    token: str = Depends(require_token),
    sweeper: BranchSweeper = Depends(get_sweeper),
):
    """List repositories owned by the caller or their organizations."""
    try:
        listing = sweeper.list_repositories(token)
    except RemoteAPIError as e:
        raise _remote_error(e)
    return RepositoryListing(items=listing.items, truncated=listing.truncated)


@router.get("/{owner}/{name}/branches", response_model=BranchListing)
def list_branches(
    owner: str,
    name: str,
    token: str = Depends(require_token),
    sweeper: BranchSweeper = Depends(get_sweeper),
):
    """List all branches of a repository, up to the page ceiling."""
    repo = _repo(owner, name)
    try:
        listing = sweeper.list_branches(repo, token)
    except RemoteAPIError as e:
        raise _remote_error(e)
    return BranchListing(items=listing.items, truncated=listing.truncated)


@router.get("/{owner}/{name}/tags", response_model=TagListing)
def list_tags(
    owner: str,
    name: str,
    token: str = Depends(require_token),
    sweeper: BranchSweeper = Depends(get_sweeper),
):
    """List all tags of a repository, up to the page ceiling."""
    repo = _repo(owner, name)
    try:
        listing = sweeper.list_tags(repo, token)
    except RemoteAPIError as e:
        raise _remote_error(e)
    return TagListing(items=listing.items, truncated=listing.truncated)


@router.post("/{owner}/{name}/archive", response_model=ArchiveResponse)
def archive_branches(
    owner: str,
    name: str,
    body: ArchiveRequest,
    token: str = Depends(require_token),
    sweeper: BranchSweeper = Depends(get_sweeper),
):
    """Archive and/or delete branches.

    Partial success is reported per branch with a 200; only batch-fatal
    conditions produce an error status.
    """
    repo = _repo(owner, name)

    try:
        request = OperationRequest(
            mode=body.operation, branches=body.branches, tag_prefix=body.tag_prefix
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = sweeper.process(repo, request, token, confirmation=body.confirmation)
    except AuthenticationMissing as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ConfirmationMismatch as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AmbiguousTagNameError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": str(e), "collisions": e.collisions},
        )
    except TagCollision as e:
        raise HTTPException(
            status_code=409, detail={"message": str(e), "conflicts": e.conflicts}
        )
    except BatchInProgress as e:
        raise HTTPException(
            status_code=409, detail={"message": str(e), "branches": e.branches}
        )
    except ConflictCheckFailed as e:
        raise HTTPException(
            status_code=502, detail={"message": str(e), "branches": e.branches}
        )

    return ArchiveResponse(results=result.results)
