"""
core/utils/crypto.py

Default hashing and address-encoding primitives used by the Substrate decoder.
Both can be replaced by passing other callables to `SubstrateDecoder`.
"""
import hashlib

from scalecodec.utils.ss58 import ss58_encode as scale_ss58_encode

from .helpers import strip_hex_prefix


def blake2b_hex(hex_data: str, digest_size: int = 32) -> str:
    """
    Hashes hex-encoded data with BLAKE2b.

    Args:
        hex_data: The data to hash as a hex string, with or without `0x`.
        digest_size: Digest length in bytes, 32 for the signing hash.

    Returns:
        The `0x`-prefixed hex digest.
    """
    data = bytes.fromhex(strip_hex_prefix(hex_data))
    return '0x' + hashlib.blake2b(data, digest_size=digest_size).hexdigest()


def ss58_encode(public_key: bytes, prefix: int) -> str:
    """
    Encodes a public key as an SS58 address for the given network prefix.

    Raises:
        ValueError: If the prefix is out of range or the key length is unsupported.
    """
    return scale_ss58_encode(bytes(public_key), ss58_format=prefix)
