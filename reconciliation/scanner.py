"""
Filesystem scanning for artwork reconciliation.

Discovers collection folders, pairs them with their external artwork folders
by normalized name, lists external artwork files, and classifies existing
artwork in a collection folder. Everything is derived fresh from the
filesystem on every call; nothing is cached between runs.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from reconciliation.aliases import acceptable_stems

# Jellyfin appends this to box-set folder names; external folders don't carry it
BOXSET_SUFFIX = " [boxset]"


@dataclass(frozen=True)
class CollectionFolder:
    """A collection folder under the Jellyfin collections root."""
    name: str
    path: str


@dataclass(frozen=True)
class ExternalFolder:
    """External artwork source folder for one collection."""
    collection_name: str
    path: str


@dataclass(frozen=True)
class ArtworkAsset:
    """One external artwork file to reconcile.

    Attributes:
        stem: File name without extension (e.g. 'poster')
        extension: Extension including the dot (e.g. '.jpg'), may be empty
        path: Full path to the file
        size_bytes: File size
        modified_time: Last-modified time (epoch seconds)
    """
    stem: str
    extension: str
    path: str
    size_bytes: int
    modified_time: float

    @property
    def file_name(self) -> str:
        return self.stem + self.extension


def normalize_collection_name(name: str) -> str:
    """Strip the box-set suffix so the name matches the external folder.

    Examples:
        >>> normalize_collection_name("Alien [boxset]")
        'Alien'
        >>> normalize_collection_name("Alien")
        'Alien'
    """
    return name.replace(BOXSET_SUFFIX, "", 1)


def split_stem(file_name: str) -> tuple[str, str]:
    """Split a file name into (stem, extension) at the last dot."""
    return os.path.splitext(file_name)


def list_collection_folders(collections_root: str) -> list[CollectionFolder]:
    """List immediate subdirectories of the collections root.

    A missing root yields an empty list; Jellyfin creates it lazily.
    """
    if not os.path.isdir(collections_root):
        return []
    folders = []
    with os.scandir(collections_root) as entries:
        for entry in entries:
            if entry.is_dir():
                folders.append(CollectionFolder(name=entry.name, path=entry.path))
    return sorted(folders, key=lambda f: f.name)


def external_folder_for(collection: CollectionFolder, external_root: str) -> ExternalFolder:
    """Derive the external artwork folder path for a collection."""
    return ExternalFolder(
        collection_name=collection.name,
        path=os.path.join(external_root, normalize_collection_name(collection.name)),
    )


def pair_folders(
    collections: Iterable[CollectionFolder],
    external_root: str,
) -> list[tuple[CollectionFolder, Optional[ExternalFolder]]]:
    """Pair each collection folder with its external folder.

    Returns:
        List of (collection, external) tuples in input order. external is None
        when no matching directory exists; the caller decides how to report it.
    """
    pairs = []
    for collection in collections:
        external = external_folder_for(collection, external_root)
        if os.path.isdir(external.path):
            pairs.append((collection, external))
        else:
            pairs.append((collection, None))
    return pairs


def scan_artwork_assets(folder: str) -> list[ArtworkAsset]:
    """List top-level files of an external folder as ArtworkAssets."""
    assets = []
    with os.scandir(folder) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            st = entry.stat()
            stem, extension = split_stem(entry.name)
            assets.append(ArtworkAsset(
                stem=stem,
                extension=extension,
                path=entry.path,
                size_bytes=st.st_size,
                modified_time=st.st_mtime,
            ))
    return sorted(assets, key=lambda a: a.file_name)


def find_matching_files(folder: str, stems: Iterable[str]) -> list[str]:
    """Find files in ``folder`` whose stem is one of ``stems``.

    Top level only, case-sensitive, any extension (``stem.*`` plus a bare
    ``stem`` with no extension).

    Returns:
        Matching file names, grouped by stem in the order ``stems`` lists them.
    """
    if not os.path.isdir(folder):
        return []
    with os.scandir(folder) as entries:
        files = sorted(entry.name for entry in entries if entry.is_file())

    matches = []
    for stem in stems:
        for file_name in files:
            if split_stem(file_name)[0] == stem:
                matches.append(file_name)
    return matches


def find_existing_artwork(collection_path: str, asset_stem: str) -> list[str]:
    """Classify an external stem and find existing files of that artwork type."""
    return find_matching_files(collection_path, acceptable_stems(asset_stem))
