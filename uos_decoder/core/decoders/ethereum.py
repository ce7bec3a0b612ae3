"""
core/decoders/ethereum.py

Provides the EthereumDecoder class for UOS payloads addressed to Ethereum
accounts (payload type 0x45).
"""
from typing import Any, Dict, List

from .base import BaseDecoder
from ..errors import MalformedAction, MalformedEthereumPayload
from ..models import EthereumSigningRequest
from ..utils.helpers import bytes_to_hex
from ..utils.uos_types import ETHEREUM_ACTIONS, ETHEREUM_ADDRESS_LENGTH, EthereumAction

ADDRESS_OFFSET = 2
DATA_OFFSET = ADDRESS_OFFSET + ETHEREUM_ADDRESS_LENGTH


class EthereumDecoder(BaseDecoder):
    """
    Ethereum UOS payload decoder.

    Layout::

        45      payload type
        00|01   action: sign data | sign transaction
        ...     22-byte account field
        ...     raw data, or the RLP-encoded transaction
    """

    def decode(self, data: bytes) -> EthereumSigningRequest:
        if len(data) < DATA_OFFSET:
            raise MalformedEthereumPayload(
                f"Ethereum payload too short: {len(data)} bytes, need at least {DATA_OFFSET}")

        try:
            action = ETHEREUM_ACTIONS[EthereumAction(data[1])]
        except ValueError:
            raise MalformedAction(f"Could not determine action type: 0x{data[1]:02X}") from None

        return EthereumSigningRequest(
            action=action,
            account=bytes_to_hex(data[ADDRESS_OFFSET:DATA_OFFSET]),
            payload=bytes(data[DATA_OFFSET:]),
        )

    def describe(self, result: EthereumSigningRequest) -> List[Dict[str, Any]]:
        payload_name = 'RLP' if result.rlp is not None else 'Data'
        return [
            self.make_item('Payload Type', 'Ethereum', 'Unsigned8', 0, 1),
            self.make_item('Action', result.action.value, 'Unsigned8', 1, 1),
            self.make_item('Account', result.account, 'OctetString', ADDRESS_OFFSET, ETHEREUM_ADDRESS_LENGTH),
            self.make_item(payload_name, bytes_to_hex(result.payload), 'OctetString',
                           DATA_OFFSET, len(result.payload)),
        ]
