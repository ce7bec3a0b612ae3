"""
core/decoders/substrate.py

Provides the SubstrateDecoder class for UOS payloads addressed to Substrate
accounts (payload type 0x53). It extracts the crypto scheme, signing command,
public key, specVersion and genesis hash, derives the SS58 account for the
target network and, for oversized transactions, replaces the call data with
its BLAKE2b hash.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping

from .base import BaseDecoder
from ..errors import (MalformedSubstratePayload, UnknownCryptoScheme, UnknownNetwork,
                      UnrecognizedCommand, UOSDecodeError)
from ..models import NetworkParams, SubstrateSigningRequest
from ..utils.crypto import blake2b_hex, ss58_encode
from ..utils.helpers import bytes_to_hex, compact_prefix_length, int_from_bytes
from ..utils.uos_types import (GENESIS_HASH_LENGTH, OVERSIZED_THRESHOLD,
                               PUBLIC_KEY_LENGTH, SPEC_VERSION_LENGTH, TRANSACTION_COMMANDS,
                               Action, CryptoScheme, SubstrateCommand)

logger = logging.getLogger(__name__)

PUBLIC_KEY_OFFSET = 3
PAYLOAD_OFFSET = PUBLIC_KEY_OFFSET + PUBLIC_KEY_LENGTH
TRAILER_LENGTH = SPEC_VERSION_LENGTH + GENESIS_HASH_LENGTH
MIN_PAYLOAD_LENGTH = PAYLOAD_OFFSET + TRAILER_LENGTH


class SubstrateDecoder(BaseDecoder):
    """
    Substrate UOS payload decoder.

    Layout::

        53      payload type
        00|01   crypto: ed25519 | sr25519
        00..03  command: sign mortal | sign hash | sign immortal | sign message
        ...     32-byte public key
        ...     signing payload (SCALE-encoded transaction, hash or message)
        ...     4-byte specVersion, little-endian
        ...     32-byte genesis hash

    The hashing and address-encoding primitives are injectable so the host
    application can route them to its native implementations.
    """

    def __init__(self, hasher: Callable[[str], str] = blake2b_hex,
                 address_encoder: Callable[[bytes, int], str] = ss58_encode,
                 allow_unknown_crypto: bool = False):
        """
        Args:
            hasher: Hashes unprefixed hex data, returns a hex digest.
            address_encoder: Encodes (public key, address prefix) to an address.
            allow_unknown_crypto: Return CryptoScheme.UNKNOWN for an unknown crypto
                byte instead of raising UnknownCryptoScheme.
        """
        self.hasher = hasher
        self.address_encoder = address_encoder
        self.allow_unknown_crypto = allow_unknown_crypto

    def decode(self, data: bytes, networks: Mapping[str, NetworkParams]) -> SubstrateSigningRequest:
        """
        Decodes a complete Substrate payload.

        Args:
            data: Payload bytes starting with the 0x53 payload type.
            networks: Network parameters keyed by `0x`-prefixed genesis hash.

        Returns:
            The decoded SubstrateSigningRequest.

        Raises:
            UnknownNetwork: If the genesis hash is not in `networks`.
            UnknownCryptoScheme: If the crypto byte is unknown and not allowed.
            UnrecognizedCommand: If the command byte is not a signing command.
            MalformedSubstratePayload: For any other failure while interpreting
                the payload; the original error is chained.
        """
        data = bytes(data)
        if len(data) < MIN_PAYLOAD_LENGTH:
            raise MalformedSubstratePayload(
                data, f"need at least {MIN_PAYLOAD_LENGTH} bytes, got {len(data)}")

        genesis_hash = bytes_to_hex(data[-GENESIS_HASH_LENGTH:], prefix='0x')
        network = networks.get(genesis_hash)
        if network is None:
            logger.error("No network registered for genesis hash %s", genesis_hash)
            raise UnknownNetwork(genesis_hash)

        crypto = self._read_crypto(data[1])
        try:
            command = SubstrateCommand(data[2])
        except ValueError:
            raise UnrecognizedCommand(f"Unknown Substrate command: 0x{data[2]:02X}") from None

        public_key = data[PUBLIC_KEY_OFFSET:PAYLOAD_OFFSET]
        raw_payload = data[PAYLOAD_OFFSET:-TRAILER_LENGTH]
        spec_version = int_from_bytes(data[-TRAILER_LENGTH:-GENESIS_HASH_LENGTH], byteorder='little')
        oversized = len(raw_payload) > OVERSIZED_THRESHOLD

        try:
            account = self.address_encoder(public_key, network.address_prefix)

            if command in TRANSACTION_COMMANDS:
                offset = compact_prefix_length(raw_payload)
                call_data = raw_payload[offset:]
                return SubstrateSigningRequest(
                    action=Action.SIGN_TRANSACTION,
                    crypto=crypto,
                    is_hash=oversized,
                    oversized=oversized,
                    account=account,
                    raw_payload=raw_payload,
                    data=self.hasher(bytes_to_hex(call_data)) if oversized else call_data,
                    spec_version=spec_version,
                    genesis_hash=genesis_hash,
                )

            # SIGN_HASH and SIGN_MSG sign the payload as given
            return SubstrateSigningRequest(
                action=Action.SIGN_DATA,
                crypto=crypto,
                is_hash=command == SubstrateCommand.SIGN_HASH,
                oversized=False,
                account=account,
                raw_payload=raw_payload,
                data=bytes_to_hex(raw_payload, prefix='0x'),
                spec_version=spec_version,
                genesis_hash=genesis_hash,
            )
        except UOSDecodeError:
            raise
        except Exception as e:
            logger.error("Failed to decode Substrate payload %s: %s", data.hex(), e)
            raise MalformedSubstratePayload(data, str(e)) from e

    def _read_crypto(self, crypto_byte: int) -> CryptoScheme:
        try:
            return CryptoScheme(crypto_byte)
        except ValueError:
            if self.allow_unknown_crypto:
                return CryptoScheme.UNKNOWN
            raise UnknownCryptoScheme(f"Unknown crypto scheme: 0x{crypto_byte:02X}") from None

    def describe(self, result: SubstrateSigningRequest) -> List[Dict[str, Any]]:
        if isinstance(result.data, bytes):
            data_value = bytes_to_hex(result.data, prefix='0x')
        else:
            data_value = result.data
        return [
            self.make_item('Payload Type', 'Substrate', 'Unsigned8', 0, 1),
            self.make_item('Crypto', result.crypto.name.lower(), 'Unsigned8', 1, 1),
            self.make_item('Action', result.action.value, 'Unsigned8', 2, 1),
            self.make_item('Account', result.account, 'SS58'),
            self.make_item('Data', data_value, 'Hash' if result.is_hash else 'OctetString',
                           PAYLOAD_OFFSET, len(result.raw_payload)),
            self.make_item('Oversized', str(result.oversized), 'Boolean'),
            self.make_item('Spec Version', str(result.spec_version), 'Unsigned32'),
            self.make_item('Genesis Hash', result.genesis_hash, 'OctetString'),
        ]
