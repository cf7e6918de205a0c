"""Container runtime client and configuration."""

from .runtime_client import RuntimeClient
from .types import RuntimeConfig

__all__ = ["RuntimeClient", "RuntimeConfig"]
