"""Tar stream unpacking."""

from .unpacker import AsyncStreamReader, unpack_stream, untar

__all__ = ["AsyncStreamReader", "unpack_stream", "untar"]
