"""Streaming tar unpacker.

Archive entries are decoded one at a time from a non-seekable stream and
written under a destination directory as they arrive.
"""

import asyncio
import functools
import io
import logging
import os
import shutil
import tarfile
from typing import BinaryIO, Iterator

import aiohttp

from ..exceptions import UnpackError
from ..models import ArchiveEntry

logger = logging.getLogger(__name__)

# Parent directories missing from the archive are created with this mode
IMPLICIT_DIR_MODE = 0o755

EMPTY_STREAM_MESSAGE = "empty file"


class AsyncStreamReader(io.RawIOBase):
    """Blocking file object over an async byte stream owned by an event loop.

    Meant to be read from a worker thread while the loop keeps running; each
    read is scheduled on the loop and waited for.
    """

    def __init__(self, stream, loop: asyncio.AbstractEventLoop) -> None:
        """Initialize the reader.

        Args:
            stream: Object with an ``async read(n)`` method (aiohttp StreamReader)
            loop: Event loop the stream belongs to
        """
        super().__init__()
        self._stream = stream
        self._loop = loop

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        future = asyncio.run_coroutine_threadsafe(
            self._stream.read(len(buffer)), self._loop
        )
        try:
            data = future.result()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise OSError(f"Failed to read archive stream: {e}") from e
        size = len(data)
        buffer[:size] = data
        return size


def iter_entries(tar: tarfile.TarFile) -> Iterator[ArchiveEntry]:
    """Yield archive entries in stream order.

    File content is only readable until the next entry is requested.
    Device nodes and FIFOs are skipped.
    """
    for member in tar:
        mode = member.mode & 0o7777
        if member.isdir():
            yield ArchiveEntry(member.name, True, mode)
        elif member.isreg():
            yield ArchiveEntry(member.name, False, mode, content=tar.extractfile(member))
        elif member.issym():
            yield ArchiveEntry(
                member.name, False, mode, is_symlink=True, link_target=member.linkname
            )
        elif member.islnk():
            yield ArchiveEntry(
                member.name, False, mode, is_hardlink=True, link_target=member.linkname
            )
        else:
            logger.debug("Skipping special file %s (type %r)", member.name, member.type)


def _is_within(root: str, path: str) -> bool:
    return os.path.commonpath([root, path]) == root


def _entry_path(dest: str, root: str, name: str, guard_paths: bool) -> str:
    """Join an archive path to the destination directory.

    With ``guard_paths`` the entry's parent directory must resolve, following
    symlinks already on disk, to a location inside the destination.
    """
    relative = name.lstrip("/")
    target = os.path.normpath(os.path.join(dest, relative))
    if guard_paths and target != dest:
        parent = os.path.realpath(os.path.dirname(target))
        if not _is_within(root, parent):
            raise UnpackError(f"Archive entry {name!r} escapes destination {dest!r}")
    return target


def _clear_path(path: str) -> None:
    """Remove a non-directory at ``path`` so it can be replaced."""
    if os.path.islink(path) or (os.path.lexists(path) and not os.path.isdir(path)):
        os.unlink(path)


def _write_entry(entry: ArchiveEntry, dest: str, root: str, guard_paths: bool) -> None:
    path = _entry_path(dest, root, entry.relative_path, guard_paths)

    if entry.is_directory:
        os.makedirs(path, entry.permission_mode, exist_ok=True)
        return

    os.makedirs(os.path.dirname(path), IMPLICIT_DIR_MODE, exist_ok=True)

    if entry.is_symlink:
        _clear_path(path)
        os.symlink(entry.link_target, path)
    elif entry.is_hardlink:
        source = _entry_path(dest, root, entry.link_target, guard_paths)
        _clear_path(path)
        os.link(source, path, follow_symlinks=False)
    else:
        _clear_path(path)
        fd = os.open(path, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, entry.permission_mode)
        with os.fdopen(fd, "wb") as f:
            shutil.copyfileobj(entry.content, f)


def untar(fileobj: BinaryIO, dest: str, *, guard_paths: bool = True) -> int:
    """Unpack a tar stream into a directory.

    A stream that ends immediately is an empty archive, not an error.

    Args:
        fileobj: Readable, possibly non-seekable, tar byte stream
        dest: Existing destination directory
        guard_paths: Reject entries that would land outside ``dest``

    Returns:
        Number of entries written

    Raises:
        UnpackError: On a malformed archive or a filesystem error
    """
    dest = os.path.normpath(os.path.abspath(dest))
    root = os.path.realpath(dest)
    count = 0

    try:
        with tarfile.open(fileobj=fileobj, mode="r|") as tar:
            for entry in iter_entries(tar):
                _write_entry(entry, dest, root, guard_paths)
                count += 1
    except tarfile.ReadError as e:
        # tarfile reports a stream that ends before the first header this way
        if count == 0 and str(e) == EMPTY_STREAM_MESSAGE:
            logger.debug("Archive stream for %r was empty", dest)
            return 0
        raise UnpackError(f"Malformed archive after {count} entries: {e}") from e
    except tarfile.TarError as e:
        raise UnpackError(f"Malformed archive after {count} entries: {e}") from e
    except OSError as e:
        raise UnpackError(f"Failed to unpack into {dest!r}: {e}") from e

    return count


async def unpack_stream(stream, dest: str, *, guard_paths: bool = True) -> int:
    """Unpack an async tar byte stream into a directory.

    The blocking decoder runs in the default executor while this coroutine
    feeds it from ``stream``.

    Args:
        stream: Object with an ``async read(n)`` method (aiohttp StreamReader)
        dest: Existing destination directory
        guard_paths: Reject entries that would land outside ``dest``

    Returns:
        Number of entries written

    Raises:
        UnpackError: On a malformed archive, a read error or a filesystem error
    """
    loop = asyncio.get_running_loop()
    reader = AsyncStreamReader(stream, loop)
    try:
        return await loop.run_in_executor(
            None, functools.partial(untar, reader, dest, guard_paths=guard_paths)
        )
    finally:
        reader.close()
