from .core.decoders import (
    FrameStripper,
    FrameAssembler,
    EthereumDecoder,
    SubstrateDecoder,
    PayloadDispatcher,
    UOSDecoder
)
from .core.collector import FrameCollector
from .core.models import NetworkParams

__version__ = "0.1.0"
__all__ = [
    'FrameStripper',
    'FrameAssembler',
    'EthereumDecoder',
    'SubstrateDecoder',
    'PayloadDispatcher',
    'UOSDecoder',
    'FrameCollector',
    'NetworkParams'
]
