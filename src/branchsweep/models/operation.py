"""Operation request and outcome models."""

from enum import Enum
from typing import List, Optional
from pydantic import ConfigDict, Field, field_validator
from .base import SweepBaseModel
from ..utils.tag_names import validate_tag_prefix


class OperationMode(str, Enum):
    """What to do with each selected branch."""

    ARCHIVE_ONLY = "archive-only"
    ARCHIVE_AND_DELETE = "archive-and-delete"
    DELETE_ONLY = "delete-only"

    @property
    def archives(self) -> bool:
        """Whether this mode creates archive tags."""
        return self is not OperationMode.DELETE_ONLY

    @property
    def deletes(self) -> bool:
        """Whether this mode deletes branch refs."""
        return self is not OperationMode.ARCHIVE_ONLY


class OperationRequest(SweepBaseModel):
    """A batch of branches to process under one mode. Immutable once built."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    mode: OperationMode = Field(description="Operation to apply")
    branches: List[str] = Field(description="Branch names, in processing order")
    tag_prefix: str = Field(
        default="archive", alias="tagPrefix", description="Archive tag prefix"
    )

    @field_validator("branches")
    @classmethod
    def validate_branches(cls, v: List[str]) -> List[str]:
        """Require a non-empty list of distinct, non-blank names."""
        if not v:
            raise ValueError("At least one branch must be selected")
        if any(not name or not name.strip() for name in v):
            raise ValueError("Branch names cannot be empty")
        seen = set()
        duplicates = []
        for name in v:
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            raise ValueError(f"Duplicate branches in request: {', '.join(duplicates)}")
        return v

    @field_validator("tag_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        validate_tag_prefix(v)
        return v


class BranchOutcome(SweepBaseModel):
    """Result of processing one branch."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    branch: str
    archived: bool = False
    deleted: bool = False
    success: bool = False
    error: Optional[str] = None

    @property
    def action(self) -> str:
        """Human readable description of what actually happened."""
        if self.archived and self.deleted:
            return "archived and deleted"
        if self.archived:
            return "archived"
        if self.deleted:
            return "deleted"
        return "unchanged"


class BatchResult(SweepBaseModel):
    """Outcomes of one request, in the request's branch order."""

    results: List[BranchOutcome] = Field(default_factory=list)

    @property
    def successes(self) -> List[BranchOutcome]:
        return [r for r in self.results if r.success]

    @property
    def failures(self) -> List[BranchOutcome]:
        return [r for r in self.results if not r.success]

    @property
    def deleted_branches(self) -> List[str]:
        return [r.branch for r in self.results if r.deleted]

    def outcome_for(self, branch: str) -> Optional[BranchOutcome]:
        return next((r for r in self.results if r.branch == branch), None)
