from __future__ import annotations

import gzip
import zlib

from .errors import SerializationError

GZIP_LEVEL = 1


def compress(data: bytes) -> bytes:
    return gzip.compress(data, compresslevel=GZIP_LEVEL)


def decompress(data: bytes) -> bytes:
    """Decode the first gzip member of `data`. Bytes after it are ignored."""
    d = zlib.decompressobj(wbits=16 + zlib.MAX_WBITS)
    try:
        out = d.decompress(data) + d.flush()
    except zlib.error as e:
        raise SerializationError(f"unable to gunzip response: {e}") from e
    if not d.eof:
        raise SerializationError("unable to gunzip response: truncated gzip stream")
    return out
