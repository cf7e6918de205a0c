"""Rootfs destination directory validation."""

import os
from pathlib import Path

from ..exceptions import DestinationInvalidError

DEFAULT_ROOTFS_DIR = "/tmp/rootfs"


def ensure_rootfs_dir(path: str | Path) -> Path:
    """Make sure the rootfs destination exists and is a directory.

    A missing directory is created (one level only, mode 0755). An existing
    directory is used as is, without being emptied.

    Args:
        path: Destination directory path

    Returns:
        Absolute destination path

    Raises:
        DestinationInvalidError: If the path is not a directory or cannot be created
    """
    dest = Path(path).absolute()
    try:
        if dest.is_dir():
            return dest
        if dest.exists():
            raise DestinationInvalidError(f"path {str(dest)!r} is not a directory")
        dest.mkdir(mode=0o755)
    except OSError as e:
        raise DestinationInvalidError(
            f"unable to create directory {str(dest)!r}: {e}"
        ) from e
    return dest
