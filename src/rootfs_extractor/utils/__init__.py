"""Utility functions for the rootfs extractor."""

from .destination import DEFAULT_ROOTFS_DIR, ensure_rootfs_dir
from .log import periodic_flush, setup_logging, start_periodic_flush

__all__ = [
    "DEFAULT_ROOTFS_DIR",
    "ensure_rootfs_dir",
    "periodic_flush",
    "setup_logging",
    "start_periodic_flush",
]
