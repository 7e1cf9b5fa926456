"""HTTP API for branchsweep."""
