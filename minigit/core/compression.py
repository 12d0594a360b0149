"""Compression collaborator used by the object store."""

import zlib
from abc import ABC, abstractmethod

from .errors import ObjectFormatError


class Compressor(ABC):
    """Compress and decompress whole byte buffers."""

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        """Return the compressed form of data."""

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """Return the original bytes, or raise ObjectFormatError."""


class ZlibCompressor(Compressor):
    """zlib-backed compressor, the on-disk default."""

    def __init__(self, level: int = zlib.Z_DEFAULT_COMPRESSION):
        self.level = level

    def compress(self, data: bytes) -> bytes:
        return zlib.compress(data, self.level)

    def decompress(self, data: bytes) -> bytes:
        try:
            return zlib.decompress(data)
        except zlib.error as e:
            raise ObjectFormatError(f"Corrupt compressed data: {e}") from e
