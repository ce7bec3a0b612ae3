"""
core/models.py

Result records produced by the UOS decoders. All of them except NetworkParams
are created per decode call and never mutated afterwards.
"""
from dataclasses import dataclass
from typing import Optional, Union

from .utils.uos_types import Action, CryptoScheme


@dataclass(frozen=True)
class NetworkParams:
    address_prefix: int
    title: str = ''


@dataclass(frozen=True)
class FrameHeader:
    frame_count: int
    current_frame: int

    @property
    def is_multipart(self) -> bool:
        return self.frame_count > 1


@dataclass(frozen=True)
class PartialAssembly:
    """One frame of a multipart payload, handed back to the caller to collect."""
    frame_count: int
    current_frame: int
    part_data: bytes


@dataclass(frozen=True)
class EthereumSigningRequest:
    action: Action
    account: str
    payload: bytes

    @property
    def rlp(self) -> Optional[bytes]:
        return self.payload if self.action is Action.SIGN_TRANSACTION else None


@dataclass(frozen=True)
class SubstrateSigningRequest:
    action: Action
    crypto: CryptoScheme
    is_hash: bool
    oversized: bool
    account: str
    raw_payload: bytes
    # Call-data bytes for a regular transaction, a hex string otherwise.
    data: Union[bytes, str]
    spec_version: int
    genesis_hash: str


ParsedPayload = Union[EthereumSigningRequest, SubstrateSigningRequest]
