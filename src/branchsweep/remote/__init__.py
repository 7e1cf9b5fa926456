"""Remote repository host access."""

from branchsweep.remote.client import RepositoryClient, Listing

__all__ = ["RepositoryClient", "Listing"]
