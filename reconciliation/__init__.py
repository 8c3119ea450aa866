"""Reconciliation package for collection artwork synchronization."""
from reconciliation.aliases import ARTWORK_TYPE_ALIASES, acceptable_stems
from reconciliation.catalog import (
    CatalogCollection,
    CollectionCatalog,
    RefreshMode,
    RefreshPriority,
    RefreshSink,
)
from reconciliation.engine import (
    ArtworkReconciler,
    FileFailure,
    ReconciliationResult,
    SyncWarning,
    WarningKind,
)
from reconciliation.errors import (
    ArtworkSyncError,
    ConfigurationError,
    MutationError,
    RunInProgressError,
)
from reconciliation.policy import ArtworkDecision, DecisionAction, compute_digest, decide
from reconciliation.run_lock import RunLock
from reconciliation.scheduler import SyncScheduler

__all__ = [
    'ARTWORK_TYPE_ALIASES',
    'acceptable_stems',
    'CatalogCollection',
    'CollectionCatalog',
    'RefreshMode',
    'RefreshPriority',
    'RefreshSink',
    'ArtworkReconciler',
    'FileFailure',
    'ReconciliationResult',
    'SyncWarning',
    'WarningKind',
    'ArtworkSyncError',
    'ConfigurationError',
    'MutationError',
    'RunInProgressError',
    'ArtworkDecision',
    'DecisionAction',
    'compute_digest',
    'decide',
    'RunLock',
    'SyncScheduler',
]
