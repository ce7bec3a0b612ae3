"""
core/networks.py

Network parameters keyed by genesis hash, used to pick the SS58 address prefix.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from .models import NetworkParams

logger = logging.getLogger(__name__)

NETWORKS_FILE_ENV = 'UOS_NETWORKS_FILE'

POLKADOT_GENESIS_HASH = '0x91b171bb158e2d3848fa23a9f1c25182fb8e20313b2c1eb49219da7a70ce90c3'
KUSAMA_GENESIS_HASH = '0xb0a8d493285c2df73290dfb7e61f870f17b41801197a149ca93654499ea3dafe'
WESTEND_GENESIS_HASH = '0xe143f23803ac50e8f6f8e62695d1ce9e4e1d68aa36c1cd2cfd15340213f3423e'

DEFAULT_NETWORKS = {
    POLKADOT_GENESIS_HASH: NetworkParams(address_prefix=0, title='Polkadot'),
    KUSAMA_GENESIS_HASH: NetworkParams(address_prefix=2, title='Kusama'),
    WESTEND_GENESIS_HASH: NetworkParams(address_prefix=42, title='Westend'),
}


def normalize_genesis_hash(genesis_hash: str) -> str:
    genesis_hash = genesis_hash.lower()
    return genesis_hash if genesis_hash.startswith('0x') else '0x' + genesis_hash


def load_networks(path) -> Dict[str, NetworkParams]:
    """
    Loads a network table from a JSON file shaped like::

        {"0x91b1...": {"prefix": 0, "title": "Polkadot"}}

    Raises:
        ValueError: If an entry has no integer prefix.
    """
    with open(path, 'r', encoding='utf-8') as f:
        entries = json.load(f)

    networks = {}
    for genesis_hash, entry in entries.items():
        prefix = entry.get('prefix')
        if not isinstance(prefix, int) or isinstance(prefix, bool):
            raise ValueError(f"Network {genesis_hash} has no integer prefix: {prefix!r}")
        networks[normalize_genesis_hash(genesis_hash)] = NetworkParams(
            address_prefix=prefix, title=entry.get('title', ''))
    return networks


def get_networks(path: Optional[str] = None) -> Dict[str, NetworkParams]:
    """Default networks, extended by the file at `path` or $UOS_NETWORKS_FILE if set."""
    networks = dict(DEFAULT_NETWORKS)
    path = path or os.environ.get(NETWORKS_FILE_ENV)
    if path:
        if Path(path).exists():
            networks.update(load_networks(path))
        else:
            logger.warning("Networks file %s not found, using defaults", path)
    return networks
