"""Disposable container lifecycle and filesystem export."""

from .exporter import export_container
from .lifecycle import create_container, ephemeral_container, remove_container

__all__ = [
    "create_container",
    "ephemeral_container",
    "export_container",
    "remove_container",
]
