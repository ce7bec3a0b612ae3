"""
core/decoders/dispatcher.py

Provides the PayloadDispatcher, which routes a complete UOS payload to the
Ethereum or Substrate decoder by its payload-type byte, and the UOSDecoder
facade running the whole pipeline from a scanned hex string.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .base import BaseDecoder
from .ethereum import EthereumDecoder
from .multipart import FrameAssembler
from .stripper import FrameStripper
from .substrate import SubstrateDecoder
from ..errors import UnparseableScan, UnrecognizedPayloadType
from ..models import (EthereumSigningRequest, NetworkParams, ParsedPayload, PartialAssembly)
from ..utils.uos_types import PayloadType, get_payload_type_name

logger = logging.getLogger(__name__)


class PayloadDispatcher(BaseDecoder):
    """Routes complete payloads to the decoder registered for their first byte."""

    def __init__(self, ethereum_decoder: EthereumDecoder = None,
                 substrate_decoder: SubstrateDecoder = None):
        self.ethereum_decoder = ethereum_decoder if ethereum_decoder is not None else EthereumDecoder()
        self.substrate_decoder = substrate_decoder if substrate_decoder is not None else SubstrateDecoder()

    def decode(self, data: bytes, networks: Mapping[str, NetworkParams]) -> ParsedPayload:
        if not data:
            raise UnrecognizedPayloadType("Payload is empty")

        payload_type = data[0]
        logger.debug("Dispatching %s payload of %d bytes", get_payload_type_name(payload_type), len(data))

        if payload_type == PayloadType.ETHEREUM:
            return self.ethereum_decoder.decode(data)
        if payload_type == PayloadType.SUBSTRATE:
            return self.substrate_decoder.decode(data, networks)
        raise UnrecognizedPayloadType(f"Payload is not formatted correctly: {bytes(data).hex()}")

    def describe(self, result: ParsedPayload) -> List[Dict[str, Any]]:
        if isinstance(result, EthereumSigningRequest):
            return self.ethereum_decoder.describe(result)
        return self.substrate_decoder.describe(result)


class UOSDecoder:
    """
    Runs a scanned QR payload through stripping, frame assembly and dispatch.

    The decoder keeps no state between calls. Multipart payloads come back as
    PartialAssembly frames; the caller collects them (e.g. with
    `FrameCollector`) and passes the reassembled bytes to `decode_bytes` with
    `multipart_complete=True`.
    """

    def __init__(self, networks: Mapping[str, NetworkParams],
                 stripper: FrameStripper = None,
                 assembler: FrameAssembler = None,
                 dispatcher: PayloadDispatcher = None):
        self.networks = networks
        self.stripper = stripper if stripper is not None else FrameStripper()
        self.assembler = assembler if assembler is not None else FrameAssembler()
        self.dispatcher = dispatcher if dispatcher is not None else PayloadDispatcher()

    def strip(self, raw: str) -> Optional[bytes]:
        return self.stripper.decode(raw)

    def decode_scan(self, raw: str, multipart_complete: bool = False) -> Union[PartialAssembly, ParsedPayload]:
        """
        Decodes one scanned QR code.

        Args:
            raw: Hex digits read from the QR code.
            multipart_complete: Passed through to the frame assembler.

        Returns:
            A PartialAssembly for a frame of a multipart payload, otherwise the
            decoded signing request.

        Raises:
            UnparseableScan: If the scan is not a binary UOS frame.
            UOSDecodeError: Any other decoding failure.
        """
        payload = self.strip(raw)
        if payload is None:
            raise UnparseableScan("Scanned data is not a valid UOS frame")
        return self.decode_bytes(payload, multipart_complete)

    def decode_bytes(self, payload: bytes, multipart_complete: bool = False) -> Union[PartialAssembly, ParsedPayload]:
        assembled = self.assembler.decode(payload, multipart_complete)
        if isinstance(assembled, PartialAssembly):
            logger.info("Received frame %d of %d", assembled.current_frame, assembled.frame_count)
            return assembled
        return self.dispatcher.decode(assembled, self.networks)

    def describe(self, result: Union[PartialAssembly, ParsedPayload]) -> List[Dict[str, Any]]:
        if isinstance(result, PartialAssembly):
            return self.assembler.describe(result)
        return self.dispatcher.describe(result)
