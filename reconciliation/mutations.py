"""
File mutations for artwork reconciliation.

Each helper attempts its operation exactly once and raises MutationError on
any OSError. Callers decide whether a failure is fatal.
"""

import os
import shutil

from reconciliation.errors import MutationError

from shared.log import create_logger
log_trace, log_debug, _, _, _ = create_logger("Mutations")


def copy_artwork(src: str, dst: str) -> None:
    """Copy ``src`` to ``dst`` byte for byte, overwriting ``dst`` if it exists.

    Only content is copied; ``dst`` gets a fresh modification time, which is
    what keeps Timestamp mode from rewriting the file on the next run.

    Raises:
        MutationError: Copy failed (permissions, disk full, name too long, ...)
    """
    try:
        shutil.copyfile(src, dst)
    except OSError as e:
        raise MutationError("copy", dst, e) from e
    log_debug(f"Copied {src} -> {dst}")


def delete_artwork(path: str) -> None:
    """Delete one existing artwork file.

    Raises:
        MutationError: Delete failed
    """
    try:
        os.remove(path)
    except OSError as e:
        raise MutationError("delete", path, e) from e
    log_debug(f"Deleted {path}")


def delete_all(paths: list[str]) -> None:
    """Delete every path, stopping at the first failure.

    Raises:
        MutationError: A delete failed; later paths are left untouched
    """
    for path in paths:
        delete_artwork(path)


def rename_if_needed(existing_path: str, desired_name: str) -> bool:
    """Rename ``existing_path`` to ``desired_name`` within its directory.

    Content and timestamps are untouched.

    Returns:
        True if a rename happened, False if the name already matched.

    Raises:
        MutationError: Rename failed
    """
    directory, current_name = os.path.split(existing_path)
    if current_name == desired_name:
        log_trace(f"{existing_path} already named {desired_name}")
        return False
    target = os.path.join(directory, desired_name)
    try:
        os.replace(existing_path, target)
    except OSError as e:
        raise MutationError("rename", existing_path, e) from e
    log_debug(f"Renamed {existing_path} -> {desired_name}")
    return True
