"""Core data models for branchsweep."""

from .base import SweepBaseModel, RemoteModel
from .repository import Repository, RepositoryRef, Branch, Tag
from .operation import OperationMode, OperationRequest, BranchOutcome, BatchResult

__all__ = [
    "SweepBaseModel",
    "RemoteModel",
    "Repository",
    "RepositoryRef",
    "Branch",
    "Tag",
    "OperationMode",
    "OperationRequest",
    "BranchOutcome",
    "BatchResult",
]
