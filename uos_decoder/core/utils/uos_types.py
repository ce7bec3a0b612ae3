from enum import Enum, IntEnum

# QR binary-mode framing
BINARY_INDICATOR = '4'
TERMINATOR = '0'
FILLER_TAIL = 'ec'
FILLER_REPEAT = 'ec11'

FRAME_HEADER_LENGTH = 5
MULTIPART_MARKER = 0x00
MAX_FRAME_COUNT = 50

# Substrate body layout
PUBLIC_KEY_LENGTH = 32
SPEC_VERSION_LENGTH = 4
GENESIS_HASH_LENGTH = 32
OVERSIZED_THRESHOLD = 256

# Ethereum body layout
ETHEREUM_ADDRESS_LENGTH = 22


class PayloadType(IntEnum):
    ETHEREUM = 0x45
    SUBSTRATE = 0x53


class EthereumAction(IntEnum):
    SIGN_DATA = 0x00
    SIGN_TRANSACTION = 0x01


class CryptoScheme(Enum):
    ED25519 = 0x00
    SR25519 = 0x01
    UNKNOWN = None


class SubstrateCommand(IntEnum):
    SIGN_MORTAL = 0x00
    SIGN_HASH = 0x01
    SIGN_IMMORTAL = 0x02
    SIGN_MSG = 0x03


class Action(Enum):
    SIGN_DATA = 'signData'
    SIGN_TRANSACTION = 'signTransaction'


ETHEREUM_ACTIONS = {
    EthereumAction.SIGN_DATA: Action.SIGN_DATA,
    EthereumAction.SIGN_TRANSACTION: Action.SIGN_TRANSACTION,
}

TRANSACTION_COMMANDS = (SubstrateCommand.SIGN_MORTAL, SubstrateCommand.SIGN_IMMORTAL)


def get_payload_type_name(type_byte: int) -> str:
    try:
        return PayloadType(type_byte).name.capitalize()
    except ValueError:
        return f"Unknown 0x{type_byte:02X}"
