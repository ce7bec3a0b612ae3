from .base import BaseDecoder
from .stripper import FrameStripper
from .multipart import FrameAssembler
from .ethereum import EthereumDecoder
from .substrate import SubstrateDecoder
from .dispatcher import PayloadDispatcher, UOSDecoder

__all__ = [
    'BaseDecoder',
    'FrameStripper',
    'FrameAssembler',
    'EthereumDecoder',
    'SubstrateDecoder',
    'PayloadDispatcher',
    'UOSDecoder'
]
