"""Data models for image references, pull progress and archive entries."""

from dataclasses import dataclass, field
from typing import Any, BinaryIO


@dataclass(frozen=True)
class ImageReference:
    """Image name and optional tag parsed from ``name[:tag]``."""

    name: str
    tag: str = ""

    def __str__(self) -> str:
        if self.tag:
            return f"{self.name}:{self.tag}"
        return self.name


@dataclass
class PullProgressMessage:
    """One decoded message from the runtime's pull progress stream."""

    status: str = ""
    id: str = ""
    progress: str = ""
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullProgressMessage":
        """Build a message from a decoded JSON object.

        The runtime reports failures either through ``error`` or through
        ``errorDetail.message``; both are folded into ``error``.
        """
        error = data.get("error")
        detail = data.get("errorDetail")
        if not error and isinstance(detail, dict):
            error = detail.get("message")
        return cls(
            status=data.get("status", ""),
            id=data.get("id", ""),
            progress=data.get("progress", ""),
            error=error or None,
        )


@dataclass(frozen=True)
class ContainerDescriptor:
    """A disposable container: runtime-assigned id plus the generated name."""

    id: str
    name: str


@dataclass
class ArchiveEntry:
    """A single file or directory record decoded from a tar stream."""

    relative_path: str
    is_directory: bool
    permission_mode: int
    content: BinaryIO | None = field(default=None, repr=False)
    is_symlink: bool = False
    is_hardlink: bool = False
    link_target: str = ""
