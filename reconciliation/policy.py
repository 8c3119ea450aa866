"""
Change-decision policy for artwork reconciliation.

Pure decision logic: given an external asset and the existing files of the
same artwork type, decide what should happen. No filesystem mutation here;
the only I/O is reading sizes, timestamps and (for ContentHash) file bytes.

Decision table:
    0 existing files           -> WRITE
    >1 existing files          -> DELETE_ALL_THEN_WRITE
    1 file, sizes differ       -> WRITE (any policy)
    1 file, AlwaysWrite        -> WRITE
    1 file, ContentHash        -> equal digests: RENAME_IF_NEEDED, else WRITE
    1 file, Timestamp          -> external <= existing: RENAME_IF_NEEDED, else WRITE
"""

import hashlib
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from reconciliation.scanner import ArtworkAsset
from validation.config import ChangeDetectionPolicy

# Read files in 1MB chunks for hashing
_CHUNK_SIZE = 1024 * 1024


class DecisionAction(Enum):
    WRITE = "write"
    DELETE_ALL_THEN_WRITE = "delete_all_then_write"
    RENAME_IF_NEEDED = "rename_if_needed"


@dataclass
class ArtworkDecision:
    """Outcome of the change-decision policy for one external asset.

    Attributes:
        action: What to do
        target_path: Where the external file ends up (collection folder + external file name)
        existing_paths: Existing files of the same artwork type (full paths)
        reason: Human-readable explanation, for logs
    """
    action: DecisionAction
    target_path: str
    existing_paths: list[str] = field(default_factory=list)
    reason: str = ""

    @property
    def writes(self) -> bool:
        return self.action != DecisionAction.RENAME_IF_NEEDED


def compute_digest(data: bytes, algorithm: str = "md5") -> str:
    """Hex digest of ``data``.

    Examples:
        >>> compute_digest(b"")
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    return hashlib.new(algorithm, data).hexdigest()


def file_digest(path: str, algorithm: str = "md5") -> str:
    """Hex digest of a file's content, streamed in chunks.

    Yields the same value as compute_digest() on the file's bytes.
    """
    h = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def decide(
    asset: ArtworkAsset,
    collection_path: str,
    existing_files: list[str],
    policy: ChangeDetectionPolicy,
    hash_algorithm: str = "md5",
) -> ArtworkDecision:
    """Decide how to reconcile one external asset with the collection folder.

    Args:
        asset: External artwork file
        collection_path: Collection folder the asset belongs in
        existing_files: File names (not paths) of matching existing artwork
        policy: Change-detection policy for the single-match case
        hash_algorithm: Digest used by ContentHash

    Returns:
        ArtworkDecision describing the action
    """
    target_path = os.path.join(collection_path, asset.file_name)
    existing_paths = [os.path.join(collection_path, name) for name in existing_files]

    if not existing_paths:
        return ArtworkDecision(DecisionAction.WRITE, target_path, [], "no existing artwork")

    if len(existing_paths) > 1:
        return ArtworkDecision(
            DecisionAction.DELETE_ALL_THEN_WRITE,
            target_path,
            existing_paths,
            f"{len(existing_paths)} existing files are ambiguous",
        )

    existing_path = existing_paths[0]
    existing_size = os.path.getsize(existing_path)
    if asset.size_bytes != existing_size:
        return ArtworkDecision(
            DecisionAction.WRITE,
            target_path,
            existing_paths,
            f"size differs ({asset.size_bytes} != {existing_size})",
        )

    if policy == ChangeDetectionPolicy.ALWAYS_WRITE:
        return ArtworkDecision(DecisionAction.WRITE, target_path, existing_paths, "always write")

    if policy == ChangeDetectionPolicy.CONTENT_HASH:
        external_hash = file_digest(asset.path, hash_algorithm)
        existing_hash = file_digest(existing_path, hash_algorithm)
        if external_hash == existing_hash:
            return ArtworkDecision(
                DecisionAction.RENAME_IF_NEEDED,
                target_path,
                existing_paths,
                f"content unchanged ({hash_algorithm} {external_hash})",
            )
        return ArtworkDecision(
            DecisionAction.WRITE,
            target_path,
            existing_paths,
            f"content differs ({external_hash} != {existing_hash})",
        )

    # Timestamp
    existing_mtime = os.path.getmtime(existing_path)
    if asset.modified_time <= existing_mtime:
        return ArtworkDecision(
            DecisionAction.RENAME_IF_NEEDED,
            target_path,
            existing_paths,
            "existing file is as new or newer",
        )
    return ArtworkDecision(DecisionAction.WRITE, target_path, existing_paths, "external file is newer")


def stale_existing_path(decision: ArtworkDecision) -> Optional[str]:
    """Existing file a single-match WRITE leaves behind under another name.

    A WRITE copies to the external file's name; if the one existing file had a
    different name (folder.png vs poster.jpg) it must be removed so the alias
    group keeps exactly one file.
    """
    if decision.action != DecisionAction.WRITE or len(decision.existing_paths) != 1:
        return None
    existing = decision.existing_paths[0]
    if os.path.basename(existing) == os.path.basename(decision.target_path):
        return None
    return existing
