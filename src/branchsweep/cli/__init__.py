"""Command line interface for branchsweep."""
