"""
Removal of the temporary files owned by an InvocationHandle.

Cleanup is best-effort and never raises: it refuses to act on a prefix with an
unexpected shape or on a directory that resolves outside the application root.
"""

from pathlib import Path
from typing import List

from youtube2txt.models.schemas import InvocationHandle
from youtube2txt.utils.filesystem import Filesystem
from youtube2txt.utils.logger import logging


def is_within_root(fs: Filesystem, directory: Path, root_dir: Path) -> bool:
    """True when the symlink-resolved directory lies inside the resolved root."""
    real_root = fs.realpath(root_dir)
    real_dir = fs.realpath(directory)
    try:
        real_dir.relative_to(real_root)
    except ValueError:
        return False
    return True


def cleanup(fs: Filesystem, handle: InvocationHandle, root_dir: Path) -> List[str]:
    """
    Delete every file in the handle's directory that starts with its prefix.

    Returns:
        Names of the files that were deleted
    """
    if not handle.has_expected_shape():
        logging.warning(f"Skipping cleanup for unexpected temp file prefix: {handle.prefix!r}")
        return []

    try:
        inside = is_within_root(fs, handle.directory, root_dir)
    except OSError as e:
        logging.warning(f"Skipping cleanup for {handle.base_path} due to path resolution error: {str(e)}")
        return []
    if not inside:
        logging.warning(f"Skipping cleanup for unexpected path: {handle.base_path}")
        return []

    try:
        names = [name for name in fs.list_dir(handle.directory) if handle.owns(name)]
    except OSError as e:
        logging.warning(f"Failed to list temporary files for {handle.prefix}: {str(e)}")
        return []

    deleted = []
    for name in names:
        try:
            fs.delete(handle.directory / name)
        except OSError as e:
            logging.warning(f"Failed to delete temporary file {name}: {str(e)}")
            continue
        deleted.append(name)

    if deleted:
        logging.debug(f"Removed {len(deleted)} temporary file(s) for {handle.prefix}")
    return deleted
