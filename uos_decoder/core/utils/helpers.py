import binascii
import json
from typing import Any

from scalecodec.base import ScaleBytes
from scalecodec.exceptions import InvalidScaleTypeValueException, RemainingScaleBytesNotEmptyException
from scalecodec.types import Compact


def bytes_to_hex(data: bytes, prefix: str = '') -> str:
    return prefix + binascii.hexlify(data).decode('ascii') if data else prefix


def int_from_bytes(data: bytes, signed: bool = False, byteorder: str = 'big') -> int:
    return int.from_bytes(data, byteorder=byteorder, signed=signed)


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ('0x', '0X') else value


def compact_prefix_length(data: bytes) -> int:
    """
    Returns the width in bytes of the SCALE compact integer at the start of `data`.

    Signing payloads for transactions start with the compact-encoded length of
    the call; the call data begins right after it.

    Raises:
        IndexError: If `data` is shorter than the encoding requires.
    """
    compact = Compact(ScaleBytes(bytearray(data)))
    try:
        compact.process_compact_bytes()
    except (IndexError, InvalidScaleTypeValueException, RemainingScaleBytesNotEmptyException) as e:
        raise IndexError(f"Insufficient data to decode compact integer: {e}") from e

    offset = compact.data.offset
    if offset > len(data):
        raise IndexError(f"Insufficient data to decode {offset}-byte compact integer.")
    return offset


def decode_to_string(message: bytes) -> str:
    """Interprets `message` as UTF-8 text. Invalid UTF-8 raises UnicodeDecodeError."""
    return bytes(message).decode('utf-8')


def ascii_to_hex(message: str) -> str:
    # No zero padding: '\n' becomes 'a', not '0a'.
    return ''.join(format(ord(char), 'x') for char in message)


def is_json_string(value: Any) -> bool:
    if not value:
        return False
    try:
        json.loads(value)
    except (TypeError, ValueError):
        return False
    return True


def is_address_string(value: str) -> bool:
    if not value:
        return False
    return value.startswith(('0x', 'ethereum:', 'substrate:'))


def encode_number(value: int) -> bytes:
    """Splits a 16-bit unsigned value into two big-endian bytes."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Value out of 16-bit range: {value}")
    return bytes([value >> 8, value & 0xFF])
