"""
Artwork reconciliation engine.

Connects the pure scanning/decision logic to the filesystem and the host
collaborators: pair collection folders with external artwork folders, decide
per artwork file, apply copies/deletes/renames, then ask the catalog to
refresh every collection that was not written to.
"""

import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

from reconciliation.catalog import RefreshMode, RefreshPriority
from reconciliation.errors import ConfigurationError, MutationError
from reconciliation.mutations import copy_artwork, delete_all, delete_artwork, rename_if_needed
from reconciliation.policy import DecisionAction, decide, stale_existing_path
from reconciliation.run_lock import RunLock
from reconciliation.scanner import (
    ArtworkAsset,
    CollectionFolder,
    ExternalFolder,
    find_existing_artwork,
    list_collection_folders,
    normalize_collection_name,
    pair_folders,
    scan_artwork_assets,
)

if TYPE_CHECKING:
    from reconciliation.catalog import CollectionCatalog, RefreshSink
    from validation.config import ArtworkSyncConfig

from shared.log import create_logger
log_trace, log_debug, log_info, log_warn, log_error = create_logger("Reconciler")


class WarningKind(Enum):
    MATCH = "match"            # no external folder for a collection
    AMBIGUITY = "ambiguity"    # several existing files for one artwork type


@dataclass
class SyncWarning:
    kind: WarningKind
    collection: str
    message: str


@dataclass
class FileFailure:
    """A per-file (or per-request) failure captured during a run.

    Attributes:
        collection: Collection folder name (or catalog name for refreshes)
        path: File the operation acted on, or the catalog id for refreshes
        operation: 'copy', 'delete', 'rename', 'inspect', 'scan', 'refresh', 'catalog'
        message: Error text
    """
    collection: str
    path: str
    operation: str
    message: str


@dataclass
class ReconciliationResult:
    """Result summary from one reconciliation run.

    Attributes:
        collections_scanned: Collection folders found under the collections root
        collections_matched: Collections with an external artwork folder
        collections_skipped: Collections without one
        artwork_files_checked: External artwork files examined
        files_written: Copies performed
        files_renamed: Existing files renamed to the external name
        files_deleted: Existing files removed (ambiguity or stale names)
        files_unchanged: Files already up to date under the right name
        updated_collections: Normalized names of collections written to this run
        refresh_requested: Catalog ids a refresh was requested for
        warnings: Match/ambiguity warnings
        failures: Captured per-file failures
        cancelled: Run stopped early via the cancel event
    """
    collections_scanned: int = 0
    collections_matched: int = 0
    collections_skipped: int = 0
    artwork_files_checked: int = 0
    files_written: int = 0
    files_renamed: int = 0
    files_deleted: int = 0
    files_unchanged: int = 0
    updated_collections: set[str] = field(default_factory=set)
    refresh_requested: list[str] = field(default_factory=list)
    warnings: list[SyncWarning] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures


class ArtworkReconciler:
    """Reconciles external collection artwork into the Jellyfin collections folder.

    Args:
        config: ArtworkSyncConfig (paths, policy, hash algorithm, data_dir)
        catalog: Supplies the collection entities for refresh dispatch
        refresh_sink: Receives refresh requests
        data_dir: Directory for the run-lock file (default: config.data_dir)
    """

    def __init__(
        self,
        config: "ArtworkSyncConfig",
        catalog: "CollectionCatalog",
        refresh_sink: "RefreshSink",
        data_dir: Optional[str] = None,
    ):
        self.config = config
        self.catalog = catalog
        self.refresh_sink = refresh_sink
        self.data_dir = data_dir if data_dir is not None else config.data_dir

    def run(
        self,
        progress: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ReconciliationResult:
        """Run one reconciliation pass.

        Args:
            progress: Called with a percentage after each collection folder
            cancel_event: Checked between collection folders; set it to stop early

        Returns:
            ReconciliationResult with counters, warnings and failures

        Raises:
            RunInProgressError: Another run holds the run lock
            ConfigurationError: External artwork root missing

        Execution steps:
            1. Acquire run lock
            2. Validate external artwork root
            3. Reconcile each collection folder
            4. Request refresh for every catalog collection not written to
            5. Log summary
        """
        with RunLock(self.data_dir):
            return self._run(progress, cancel_event)

    def _run(self, progress, cancel_event) -> ReconciliationResult:
        external_root = self.config.external_artwork_directory_path
        log_info("Starting artwork synchronization")
        log_info(f"Change detection policy: {self.config.change_detection_policy.value}")

        if not os.path.isdir(external_root):
            raise ConfigurationError(f"{external_root} is not a valid directory")

        result = ReconciliationResult()
        collections = list_collection_folders(self.config.collections_path)
        result.collections_scanned = len(collections)
        log_info(f"Found {len(collections)} collection folders in {self.config.collections_path}")

        pairs = pair_folders(collections, external_root)
        for index, (collection, external) in enumerate(pairs):
            if cancel_event is not None and cancel_event.is_set():
                log_warn(f"Cancelled before {collection.name}; {len(collections) - index} folders not processed")
                result.cancelled = True
                break
            self._process_collection(collection, external, result)
            if progress is not None:
                progress((index + 1) * 100.0 / len(collections))

        if result.cancelled:
            log_info("Skipping refresh dispatch for cancelled run")
        else:
            self._dispatch_refreshes(result)

        # Per-folder reports already end at 100
        if progress is not None and not collections:
            progress(100.0)

        self._log_summary(result)
        return result

    # ------------------------------------------------------------------
    # Per collection
    # ------------------------------------------------------------------

    def _process_collection(
        self,
        collection: CollectionFolder,
        external: Optional[ExternalFolder],
        result: ReconciliationResult,
    ) -> None:
        log_info(f"Executing '{collection.path}'")

        if external is None:
            message = f"No external movie set artwork folder found for movieset {collection.name}"
            log_warn(message)
            result.warnings.append(SyncWarning(WarningKind.MATCH, collection.name, message))
            result.collections_skipped += 1
            return

        result.collections_matched += 1
        try:
            assets = scan_artwork_assets(external.path)
        except OSError as e:
            log_error(f"Failed to list artwork in {external.path}: {e}")
            result.failures.append(FileFailure(collection.name, external.path, "scan", str(e)))
            return

        log_info(f"Found {len(assets)} artwork files for {collection.name}")
        external_names = {asset.file_name for asset in assets}
        for asset in assets:
            result.artwork_files_checked += 1
            # Files named after another external asset belong to that asset
            claimed = external_names - {asset.file_name}
            self._reconcile_asset(collection, asset, claimed, result)

    def _reconcile_asset(
        self,
        collection: CollectionFolder,
        asset: ArtworkAsset,
        claimed: set[str],
        result: ReconciliationResult,
    ) -> None:
        log_trace(f"Processing artwork file {asset.path}")
        try:
            existing = [name for name in find_existing_artwork(collection.path, asset.stem)
                        if name not in claimed]
            decision = decide(
                asset,
                collection.path,
                existing,
                self.config.change_detection_policy,
                self.config.hash_algorithm,
            )
        except OSError as e:
            log_error(f"Failed to inspect {asset.file_name} for {collection.name}: {e}")
            result.failures.append(FileFailure(collection.name, asset.path, "inspect", str(e)))
            return

        log_debug(f"{collection.name}/{asset.file_name}: {decision.action.value} ({decision.reason})")

        try:
            if not decision.writes:
                if rename_if_needed(decision.existing_paths[0], asset.file_name):
                    result.files_renamed += 1
                else:
                    result.files_unchanged += 1
                    log_trace(f"Most recent state of {asset.file_name} is already present")
                return

            if decision.action == DecisionAction.DELETE_ALL_THEN_WRITE:
                message = (f"Multiple files found for {asset.file_name} in {collection.name}: "
                           f"{[os.path.basename(p) for p in decision.existing_paths]}. "
                           f"Deleting all files to avoid conflicts")
                log_warn(message)
                result.warnings.append(SyncWarning(WarningKind.AMBIGUITY, collection.name, message))
                delete_all(decision.existing_paths)
                result.files_deleted += len(decision.existing_paths)

            copy_artwork(asset.path, decision.target_path)
            result.files_written += 1
            result.updated_collections.add(normalize_collection_name(collection.name))

            stale = stale_existing_path(decision)
            if stale is not None and os.path.exists(stale) and os.path.samefile(stale, decision.target_path):
                # Case-insensitive filesystem: the copy overwrote the existing file
                stale = None
            if stale is not None:
                delete_artwork(stale)
                result.files_deleted += 1
        except MutationError as e:
            log_error(f"Failed to sync {asset.file_name} for {collection.name}: {e}")
            result.failures.append(FileFailure(collection.name, e.path, e.operation, str(e)))

    # ------------------------------------------------------------------
    # Refresh dispatch
    # ------------------------------------------------------------------

    def _dispatch_refreshes(self, result: ReconciliationResult) -> None:
        """Request a full image refresh for every collection not written to."""
        try:
            collections = self.catalog.list_collections()
        except Exception as e:
            log_error(f"Failed to list catalog collections: {e}")
            result.failures.append(FileFailure("", "", "catalog", str(e)))
            return

        log_info(f"Found {len(collections)} collections in catalog")
        for entity in collections:
            if normalize_collection_name(entity.name) in result.updated_collections:
                log_debug(f"Skipping refresh for {entity.name} (artwork written this run)")
                continue
            log_info(f"Updating Metadata for {entity.name}")
            try:
                self.refresh_sink.request_refresh(
                    entity.id,
                    RefreshMode.FULL_IMAGE_REFRESH,
                    RefreshPriority.HIGH,
                )
                result.refresh_requested.append(entity.id)
            except Exception as e:
                log_warn(f"Failed to request refresh for {entity.name}: {e}")
                result.failures.append(FileFailure(entity.name, entity.id, "refresh", str(e)))

    def _log_summary(self, result: ReconciliationResult) -> None:
        log_info("=== Artwork Sync Summary ===")
        log_info(f"Collections: {result.collections_scanned} scanned, "
                 f"{result.collections_matched} matched, {result.collections_skipped} without external artwork")
        log_info(f"Artwork files checked: {result.artwork_files_checked}")
        log_info(f"  Written: {result.files_written}")
        log_info(f"  Renamed: {result.files_renamed}")
        log_info(f"  Deleted: {result.files_deleted}")
        log_info(f"  Unchanged: {result.files_unchanged}")
        log_info(f"Collections updated: {sorted(result.updated_collections)}")
        log_info(f"Refresh requested: {len(result.refresh_requested)}")
        if result.cancelled:
            log_warn("Run was cancelled before all collections were processed")
        if result.failures:
            log_warn(f"{len(result.failures)} failures:")
            for failure in result.failures:
                log_warn(f"  [{failure.operation}] {failure.collection}: {failure.message}")
