"""rootfs-extractor - Materialize a container image's root filesystem on disk."""

__version__ = "0.1.0"

from .core.runtime_client import RuntimeClient
from .core.types import RuntimeConfig
from .exceptions import (
    ContainerCreateError,
    ContainerRemoveError,
    DestinationInvalidError,
    ExportError,
    ExtractionError,
    InvalidReferenceError,
    PullFailedError,
    RootfsExtractorError,
    RuntimeConnectionError,
    UnpackError,
)
from .extract import ExtractionResult, Stage, extract_rootfs
from .image.reference import parse_image_reference
from .models import ImageReference

__all__ = [
    "RuntimeClient",
    "RuntimeConfig",
    "extract_rootfs",
    "ExtractionResult",
    "Stage",
    "parse_image_reference",
    "ImageReference",
    "RootfsExtractorError",
    "RuntimeConnectionError",
    "InvalidReferenceError",
    "PullFailedError",
    "DestinationInvalidError",
    "ContainerCreateError",
    "ExportError",
    "UnpackError",
    "ContainerRemoveError",
    "ExtractionError",
]
