"""
Exception hierarchy for artwork reconciliation.

ConfigurationError is fatal for a run and is raised before anything is touched.
MutationError is raised by the mutation helpers; the reconciler captures it
per file so one bad file never aborts the remaining work.
"""

from typing import Optional


class ArtworkSyncError(Exception):
    """Base class for all artwork sync errors."""
    pass


class ConfigurationError(ArtworkSyncError):
    """Setup prerequisite missing (e.g. external artwork root does not exist)."""
    pass


class RunInProgressError(ArtworkSyncError):
    """Another reconciliation run currently holds the run lock."""
    pass


class MutationError(ArtworkSyncError):
    """
    A copy, delete, or rename failed.

    Attributes:
        operation: 'copy', 'delete', or 'rename'
        path: Path the operation was acting on
    """

    def __init__(self, operation: str, path: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} failed for {path}{detail}")
