"""Test helpers: in-memory runtime client and tar builders."""

import io
import tarfile
from contextlib import asynccontextmanager

from rootfs_extractor.exceptions import (
    ContainerCreateError,
    ContainerRemoveError,
    ExportError,
)
from rootfs_extractor.models import PullProgressMessage


def build_tar(entries) -> bytes:
    """Build an uncompressed tar archive in memory.

    Each entry is ``(name, kind, mode, payload)`` where kind is one of
    ``"dir"``, ``"file"``, ``"symlink"`` or ``"hardlink"``; payload is file
    bytes or a link target.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name, kind, mode, payload in entries:
            info = tarfile.TarInfo(name)
            info.mode = mode
            if kind == "dir":
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            elif kind == "file":
                info.size = len(payload)
                tar.addfile(info, fileobj=io.BytesIO(payload))
            elif kind == "symlink":
                info.type = tarfile.SYMTYPE
                info.linkname = payload
                tar.addfile(info)
            elif kind == "hardlink":
                info.type = tarfile.LNKTYPE
                info.linkname = payload
                tar.addfile(info)
            elif kind == "fifo":
                info.type = tarfile.FIFOTYPE
                tar.addfile(info)
            else:
                raise ValueError(f"unknown entry kind {kind!r}")
    return buf.getvalue()


class FakeStream:
    """Async byte stream with the ``read(n)`` shape of aiohttp's StreamReader."""

    def __init__(self, data: bytes, chunk_limit: int = 1000) -> None:
        self._buf = io.BytesIO(data)
        self._chunk_limit = chunk_limit
        self.reads = 0

    async def read(self, n: int = -1) -> bytes:
        self.reads += 1
        if n < 0 or n > self._chunk_limit:
            n = self._chunk_limit
        return self._buf.read(n)


class FakeRuntimeClient:
    """Records every runtime call and replays canned responses."""

    def __init__(
        self,
        progress=None,
        tar_bytes: bytes = b"",
        container_id: str = "c0ffee",
        create_error: bool = False,
        export_error: bool = False,
        remove_error: bool = False,
        reachable: bool = True,
    ) -> None:
        self.progress = progress or [{"status": "Pull complete"}]
        self.tar_bytes = tar_bytes
        self.container_id = container_id
        self.create_error = create_error
        self.export_error = export_error
        self.remove_error = remove_error
        self.reachable = reachable
        self.calls = []
        self.messages_sent = 0
        self.pull_closed = False
        self.export_released = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def ping(self) -> bool:
        return self.reachable

    async def pull_image(self, reference):
        self.calls.append(("pull", reference.name, reference.tag))
        try:
            for message in self.progress:
                self.messages_sent += 1
                yield PullProgressMessage.from_dict(message)
        finally:
            self.pull_closed = True

    async def create_container(self, name, image, entrypoint):
        self.calls.append(("create", name, image, tuple(entrypoint)))
        if self.create_error:
            raise ContainerCreateError(
                f"Failed to create container {name!r}: conflict", container_name=name
            )
        return {"Id": self.container_id, "Warnings": ["low memory"]}

    @asynccontextmanager
    async def export_container(self, container_id):
        self.calls.append(("export", container_id))
        if self.export_error:
            raise ExportError(
                f"Failed to export container {container_id!r}: boom",
                container_id=container_id,
            )
        try:
            yield FakeStream(self.tar_bytes)
        finally:
            self.export_released = True

    async def remove_container(self, container_id, force=True):
        self.calls.append(("remove", container_id, force))
        if self.remove_error:
            raise ContainerRemoveError(
                f"Failed to remove container {container_id!r}: busy",
                container_id=container_id,
            )

    def call_names(self):
        return [call[0] for call in self.calls]
