"""
core/errors.py

Exception types raised while decoding UOS payloads. Every decode attempt either
returns one result or raises exactly one of these.
"""


class UOSDecodeError(ValueError):
    """Base class for all UOS decoding failures."""


class UnparseableScan(UOSDecodeError):
    """The scanned string is not a binary QR payload with a valid length prefix."""


class MalformedFrame(UOSDecodeError):
    """The multipart frame header is truncated or declares too many frames."""


class UnrecognizedPayloadType(UOSDecodeError):
    """The payload-type byte is neither Ethereum nor Substrate."""


class MalformedAction(UOSDecodeError):
    """The Ethereum action byte is not a known action."""


class MalformedEthereumPayload(UOSDecodeError):
    """The Ethereum payload is too short for its fixed fields."""


class UnknownNetwork(UOSDecodeError):
    """The genesis hash has no entry in the network table."""

    def __init__(self, genesis_hash: str):
        super().__init__(f"No network registered for genesis hash {genesis_hash}")
        self.genesis_hash = genesis_hash


class UnrecognizedCommand(UOSDecodeError):
    """The Substrate command byte is not a known signing command."""


class UnknownCryptoScheme(UOSDecodeError):
    """The Substrate crypto byte is neither Ed25519 nor Sr25519."""


class MalformedSubstratePayload(UOSDecodeError):
    """
    Interpreting the Substrate body failed.

    The payload that failed to decode is kept on `payload` and the underlying
    error is chained as `__cause__`.
    """

    def __init__(self, payload: bytes, reason: str = ""):
        message = f"Something went wrong decoding the Substrate UOS payload: {payload.hex()}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.payload = payload
