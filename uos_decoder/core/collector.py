"""
core/collector.py

Caller-side bookkeeping for multipart UOS payloads. The decoders are stateless,
so the scanning loop keeps one FrameCollector per payload being scanned.
"""
import logging
from typing import Dict, List, Optional

from .errors import MalformedFrame
from .models import PartialAssembly
from .utils.helpers import encode_number
from .utils.uos_types import MULTIPART_MARKER

logger = logging.getLogger(__name__)


class FrameCollector:
    """
    Accumulates the frames of one multipart payload by frame index.

    Frames seen twice are ignored. A frame announcing a different frame count
    than the first one belongs to another payload and is rejected.
    """

    def __init__(self):
        self.frame_count: Optional[int] = None
        self.parts: Dict[int, bytes] = {}

    def add(self, frame: PartialAssembly) -> bool:
        """
        Records a frame.

        Returns:
            True if the frame was new, False for a duplicate.

        Raises:
            MalformedFrame: If the frame index is out of range or the frame
                count does not match earlier frames.
        """
        if self.frame_count is not None and frame.frame_count != self.frame_count:
            raise MalformedFrame(
                f"Frame announces {frame.frame_count} frames, expected {self.frame_count}")

        if not 0 <= frame.current_frame < frame.frame_count:
            raise MalformedFrame(
                f"Frame index {frame.current_frame} out of range for {frame.frame_count} frames")

        if frame.current_frame in self.parts:
            return False

        self.frame_count = frame.frame_count
        self.parts[frame.current_frame] = frame.part_data
        logger.debug("Collected frame %d (%d/%d)", frame.current_frame, len(self.parts), self.frame_count)
        return True

    def missing_frames(self) -> List[int]:
        if self.frame_count is None:
            return []
        return [index for index in range(self.frame_count) if index not in self.parts]

    def is_complete(self) -> bool:
        return self.frame_count is not None and len(self.parts) == self.frame_count

    def reassemble(self) -> bytes:
        """
        Joins the collected frames in index order behind a fresh frame header,
        ready for `FrameAssembler.decode(..., multipart_complete=True)`.
        """
        if not self.is_complete():
            raise MalformedFrame(f"Cannot reassemble, missing frames {self.missing_frames()}")

        header = bytes([MULTIPART_MARKER]) + encode_number(self.frame_count) + encode_number(0)
        return header + b''.join(self.parts[index] for index in range(self.frame_count))

    def reset(self):
        self.frame_count = None
        self.parts = {}
