"""CLI command groups for branchsweep."""
