"""
core/decoders/multipart.py

Provides the FrameAssembler class, which reads the UOS multipart frame header
and decides whether a stripped payload is a frame still to be collected or a
complete payload ready for dispatch.
"""
from typing import Any, Dict, List, Union

from .base import BaseDecoder
from ..errors import MalformedFrame
from ..models import FrameHeader, PartialAssembly
from ..utils.helpers import bytes_to_hex, int_from_bytes
from ..utils.uos_types import FRAME_HEADER_LENGTH, MAX_FRAME_COUNT


class FrameAssembler(BaseDecoder):
    """
    UOS multipart frame header decoder.

    Header layout (5 bytes)::

        00      reserved / multipart marker
        0001    frame count, big-endian
        0000    current frame index, big-endian

    Single-frame payloads carry the header too, with a frame count of 0 or 1.
    The assembler never stores frames: collecting them is up to the caller
    (see `FrameCollector`), which calls again with `multipart_complete=True`
    once it has reassembled the whole payload.
    """

    def read_header(self, data: bytes) -> FrameHeader:
        if len(data) < FRAME_HEADER_LENGTH:
            raise MalformedFrame(f"Frame too short for the multipart header: {len(data)} bytes")

        frame_count = int_from_bytes(data[1:3])
        if frame_count > MAX_FRAME_COUNT:
            raise MalformedFrame(f"Frame count {frame_count} exceeds the limit of {MAX_FRAME_COUNT}")

        return FrameHeader(frame_count=frame_count, current_frame=int_from_bytes(data[3:5]))

    def decode(self, data: bytes, multipart_complete: bool = False) -> Union[PartialAssembly, bytes]:
        """
        Classifies a stripped payload as a partial frame or a complete payload.

        Args:
            data: Payload bytes as returned by `FrameStripper.decode`.
            multipart_complete: True when `data` is a payload the caller has
                already reassembled from all of its frames.

        Returns:
            A PartialAssembly for a frame of an incomplete multipart payload,
            otherwise the bytes following the frame header.

        Raises:
            MalformedFrame: If the header is truncated or the frame count is
                above the supported maximum.
        """
        header = self.read_header(data)
        body = bytes(data[FRAME_HEADER_LENGTH:])

        if header.is_multipart and not multipart_complete:
            return PartialAssembly(
                frame_count=header.frame_count,
                current_frame=header.current_frame,
                part_data=body,
            )
        return body

    def describe(self, result: Union[PartialAssembly, bytes]) -> List[Dict[str, Any]]:
        if isinstance(result, PartialAssembly):
            return [
                self.make_item('Frame Count', str(result.frame_count), 'Unsigned16', 1, 2),
                self.make_item('Current Frame', str(result.current_frame), 'Unsigned16', 3, 2),
                self.make_item('Part Data', bytes_to_hex(result.part_data), 'OctetString',
                               FRAME_HEADER_LENGTH, len(result.part_data)),
            ]
        return [self.make_item('UOS Payload', bytes_to_hex(result), 'OctetString',
                               FRAME_HEADER_LENGTH, len(result))]
