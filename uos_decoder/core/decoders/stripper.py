"""
core/decoders/stripper.py

Provides the FrameStripper class, which turns the raw hex string read from a
binary-mode QR code into payload bytes. It removes the QR filler padding,
checks the mode indicator and terminator digits and validates the length prefix.
"""
import logging
from typing import Any, Dict, List, Optional

from .base import BaseDecoder
from ..utils.helpers import bytes_to_hex
from ..utils.uos_types import BINARY_INDICATOR, FILLER_REPEAT, FILLER_TAIL, TERMINATOR

logger = logging.getLogger(__name__)

HEX_DIGITS = frozenset("0123456789abcdef")


class FrameStripper(BaseDecoder):
    """
    QR binary frame stripper.

    A scanned code looks like::

        4            binary mode indicator
        37 | 0037    length prefix, one or two bytes
        ...          payload
        0            terminator
        ec11ec11ec   filler bytes up to the QR capacity

    Failing to strip is a soft failure: `decode` returns None and the caller is
    expected to ask for a rescan.
    """

    def decode(self, data: str) -> Optional[bytes]:
        """
        Strips a raw scanned hex string down to its payload bytes.

        Args:
            data: Hex digits as produced by the QR reader, without `0x`.

        Returns:
            The payload bytes, or None if the string is not a binary-mode
            payload with a matching length prefix.
        """
        if not data:
            return None

        raw = data.lower()

        # Filler padding at the end: one trailing 'ec', then 'ec11' repeats
        if raw.endswith(FILLER_TAIL):
            raw = raw[:-len(FILLER_TAIL)]
        while raw.endswith(FILLER_REPEAT):
            raw = raw[:-len(FILLER_REPEAT)]

        if not raw.startswith(BINARY_INDICATOR) or not raw.endswith(TERMINATOR) or len(raw) < 2:
            logger.debug("Scan is not a binary QR payload: %s", data)
            return None

        raw = raw[len(BINARY_INDICATOR):-len(TERMINATOR)]

        if not all(char in HEX_DIGITS for char in raw):
            logger.debug("Payload contains non-hex digits: %s", raw)
            return None

        length8 = int(raw[:2], 16) if len(raw) >= 2 else None
        length16 = int(raw[:4], 16) if len(raw) >= 4 else None

        if length8 is not None and length8 * 2 + 2 == len(raw):
            length, body = length8, raw[2:]
        elif length16 is not None and length16 * 2 + 4 == len(raw):
            length, body = length16, raw[4:]
        else:
            logger.debug("Length prefix does not match the %d remaining hex digits", len(raw))
            return None

        payload = bytes.fromhex(body)
        if len(payload) != length:
            logger.debug("Decoded %d bytes, length prefix declares %d", len(payload), length)
            return None
        return payload

    def describe(self, result: Optional[bytes]) -> List[Dict[str, Any]]:
        if result is None:
            return [self.make_item('Error', 'Unparseable scan', 'Error')]
        return [self.make_item('QR Payload', bytes_to_hex(result), 'OctetString', 0, len(result))]
