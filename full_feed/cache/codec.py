"""
Reversible compression of cached article text.

Text is stored zlib-compressed. If compression fails for any reason the raw
UTF-8 bytes are stored instead, and the flag returned alongside the bytes
records which form was used so decode() can reverse the choice.
"""

from __future__ import annotations

import zlib

from ..logging_utils import get_logger


logger = get_logger("cache.codec")

_CHUNK_SIZE = 16 * 1024


def encode(text: str) -> tuple[bytes, bool]:
    """Compress text for storage.

    Args:
        text: The article text to store

    Returns:
        Tuple of (stored bytes, compressed flag). Never raises for str input.
    """
    raw = text.encode("utf-8", errors="replace")
    try:
        compressor = zlib.compressobj()
        data = compressor.compress(raw) + compressor.flush()
    except (zlib.error, MemoryError, ValueError) as exc:
        logger.warning("Compression failed, storing raw bytes: %s", exc)
        return raw, False
    return data, True


def decode(data: bytes, compressed: bool) -> str:
    """Restore stored bytes to text.

    Invalid byte sequences become U+FFFD. A corrupt compressed stream yields
    whatever prefix could be recovered instead of raising.
    """
    if not compressed:
        return data.decode("utf-8", errors="replace")

    decompressor = zlib.decompressobj()
    parts: list[bytes] = []
    for start in range(0, len(data), _CHUNK_SIZE):
        try:
            parts.append(decompressor.decompress(data[start:start + _CHUNK_SIZE]))
        except zlib.error as exc:
            logger.warning("Corrupt cached content, returning partial text: %s", exc)
            break
    else:
        try:
            parts.append(decompressor.flush())
        except zlib.error as exc:
            logger.warning("Corrupt cached content, returning partial text: %s", exc)
    return b"".join(parts).decode("utf-8", errors="replace")
