"""branchsweep - Bulk archive and delete branches on a remote repository host."""

from branchsweep.core import BranchSweeper, LifecycleOrchestrator
from branchsweep.models import OperationMode, OperationRequest, RepositoryRef

try:
    from importlib.metadata import version

    __version__ = version("branchsweep")
except Exception:
    # Package metadata is not available when running from a source checkout
    __version__ = "0.1.0"

__all__ = [
    "BranchSweeper",
    "LifecycleOrchestrator",
    "OperationMode",
    "OperationRequest",
    "RepositoryRef",
]
