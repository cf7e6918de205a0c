"""Export a container's filesystem into a local directory."""

import logging
from pathlib import Path

from ..core.runtime_client import RuntimeClient
from ..exceptions import ExportError, UnpackError
from ..tar.unpacker import unpack_stream

logger = logging.getLogger(__name__)


async def export_container(
    client: RuntimeClient,
    container_id: str,
    rootfs_dir: str | Path,
    *,
    guard_paths: bool = True,
) -> int:
    """Stream the container's filesystem export into ``rootfs_dir``.

    Args:
        client: Open runtime client
        container_id: Id of the container to export
        rootfs_dir: Existing destination directory
        guard_paths: Reject archive entries that would land outside ``rootfs_dir``

    Returns:
        Number of archive entries written

    Raises:
        ExportError: If the export request fails or its content cannot be unpacked
    """
    async with client.export_container(container_id) as stream:
        try:
            count = await unpack_stream(stream, str(rootfs_dir), guard_paths=guard_paths)
        except UnpackError as e:
            raise ExportError(
                f"failed to untar the content of container {container_id!r}: {e}",
                container_id=container_id,
            ) from e

    logger.debug("Unpacked %d entries from container %r", count, container_id)
    return count
