"""
CP437 wire codec.

BBS systems send 8-bit text where the upper half of the byte range holds
the IBM PC character set: accented letters, box drawing and math symbols.
Decoding is total: code page 437 defines all 256 byte values, so the
stream can be decoded in arbitrary chunks and never raises.

Outbound text is plain ASCII since the line editor only accepts
printable ASCII.
"""

from __future__ import annotations

from typing import Final

WIRE_ENCODING: Final = "cp437"

# Upper half of the code page (bytes 0x80-0xFF), in byte order.
CP437_TABLE: Final[tuple[str, ...]] = tuple(bytes(range(0x80, 0x100)).decode(WIRE_ENCODING))


def decode(data: bytes) -> str:
    """
    Decode wire bytes to display text.

    Bytes 0-127 map to the identical code point, so ANSI escape
    sequences pass through unchanged. Bytes 128-255 map to the
    characters in CP437_TABLE.

    Args:
        data: Raw bytes received from the remote.

    Returns:
        Text with exactly one character per input byte.
    """
    return data.decode(WIRE_ENCODING)


def encode(text: str) -> bytes:
    """Encode outbound text as ASCII, replacing anything else with '?'."""
    return text.encode("ascii", errors="replace")


__all__ = ["CP437_TABLE", "WIRE_ENCODING", "decode", "encode"]
