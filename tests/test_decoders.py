"""
tests/test_decoders.py

Unit tests for the UOS decoders (frame stripper, multipart assembler, payload
dispatcher, Ethereum and Substrate decoders) and the frame collector.
Test payloads are built byte by byte so each test shows the layout it exercises.
"""
import hashlib
import os
import struct
import sys
import unittest

# Add project root to Python path to allow direct import of uos_decoder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from uos_decoder.core.collector import FrameCollector
from uos_decoder.core.decoders import (EthereumDecoder, FrameAssembler, FrameStripper,
                                       PayloadDispatcher, SubstrateDecoder, UOSDecoder)
from uos_decoder.core.errors import (MalformedAction, MalformedEthereumPayload, MalformedFrame,
                                     MalformedSubstratePayload, UnknownCryptoScheme,
                                     UnknownNetwork, UnparseableScan, UnrecognizedCommand,
                                     UnrecognizedPayloadType)
from uos_decoder.core.models import (EthereumSigningRequest, NetworkParams, PartialAssembly,
                                     SubstrateSigningRequest)
from uos_decoder.core.utils.crypto import ss58_encode
from uos_decoder.core.utils.uos_types import Action, CryptoScheme

ALICE = bytes.fromhex('d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d')
GENESIS = bytes.fromhex('91b171bb158e2d3848fa23a9f1c25182fb8e20313b2c1eb49219da7a70ce90c3')
GENESIS_HEX = '0x' + GENESIS.hex()
OTHER_GENESIS = bytes(range(32))
NETWORKS = {GENESIS_HEX: NetworkParams(address_prefix=2, title='Test')}


def build_scan(payload: bytes, filler: str = 'ec11ec11ec11ec') -> str:
    """Wraps payload bytes the way the signing device's QR encoder does."""
    if len(payload) < 256:
        prefix = f'{len(payload):02x}'
    else:
        prefix = f'{len(payload):04x}'
    return '4' + prefix + payload.hex() + '0' + filler


def frame_header(frame_count: int = 1, current_frame: int = 0) -> bytes:
    return b'\x00' + frame_count.to_bytes(2, 'big') + current_frame.to_bytes(2, 'big')


def substrate_payload(signing_payload: bytes, command: int = 0x00, crypto: int = 0x01,
                      spec_version: int = 9110, genesis: bytes = GENESIS) -> bytes:
    return (b'\x53' + bytes([crypto, command]) + ALICE + signing_payload
            + struct.pack('<I', spec_version) + genesis)


def ethereum_payload(action: int, data: bytes = b'hello') -> bytes:
    return b'\x45' + bytes([action]) + bytes(range(22)) + data


class TestFrameStripper(unittest.TestCase):
    """Tests for removing QR padding, indicator, terminator and length prefix."""

    def setUp(self):
        self.stripper = FrameStripper()

    def test_strip_one_byte_length(self):
        self.assertEqual(self.stripper.decode(build_scan(b'\x01\x02\x03')), b'\x01\x02\x03')

    def test_strip_two_byte_length(self):
        payload = bytes(range(256)) + b'\xaa' * 44
        scan = build_scan(payload)
        self.assertTrue(scan.startswith('4012c'))
        self.assertEqual(self.stripper.decode(scan), payload)

    def test_strip_filler_variants(self):
        """Tests that any number of filler repeats, or none, is removed."""
        for filler in ('', 'ec', 'ec11', 'ec11ec', 'ec11ec11ec11ec11ec'):
            with self.subTest(filler=filler):
                self.assertEqual(self.stripper.decode(build_scan(b'\xde\xad', filler)), b'\xde\xad')

    def test_strip_uppercase_hex(self):
        self.assertEqual(self.stripper.decode(build_scan(b'\xab\xcd').upper()), b'\xab\xcd')

    def test_empty_input(self):
        self.assertIsNone(self.stripper.decode(''))
        self.assertIsNone(self.stripper.decode(None))

    def test_wrong_indicator_or_terminator(self):
        scan = build_scan(b'\x01\x02', filler='')
        self.assertIsNone(self.stripper.decode('2' + scan[1:]))
        self.assertIsNone(self.stripper.decode(scan[:-1] + '1'))

    def test_length_mismatch(self):
        self.assertIsNone(self.stripper.decode('4' + '05' + '0102' + '0'))
        self.assertIsNone(self.stripper.decode('4' + '0005' + '0102' + '0'))

    def test_non_hex_payload(self):
        """Tests that characters outside the hex digits never pass the length check."""
        for scan in ('4' + '02' + '01zz' + '0',
                     '4' + '02' + 'ab  ' + '0',
                     '4' + '02' + 'ab\ncd' + '0',
                     '4' + '+1' + 'ab' + '0',
                     '4' + '0x01' + 'ab' + '0',
                     '4' + '0_02' + 'abcd' + '0'):
            with self.subTest(scan=scan):
                self.assertIsNone(self.stripper.decode(scan))

    def test_round_trip_prefix_boundaries(self):
        """Tests stripping at the edges of the one-byte and two-byte length prefixes."""
        for length in (0, 1, 255, 256, 0xFFFF):
            with self.subTest(length=length):
                payload = bytes(i % 256 for i in range(length))
                scan = build_scan(payload)
                prefix_width = 2 if length < 256 else 4
                self.assertEqual(int(scan[1:1 + prefix_width], 16), length)
                self.assertEqual(self.stripper.decode(scan), payload)

    def test_indicator_and_terminator_only(self):
        self.assertIsNone(self.stripper.decode('40'))


class TestFrameAssembler(unittest.TestCase):
    """Tests for frame header interpretation."""

    def setUp(self):
        self.assembler = FrameAssembler()

    def test_single_frame_returns_body(self):
        for frame_count in (0, 1):
            with self.subTest(frame_count=frame_count):
                result = self.assembler.decode(frame_header(frame_count) + b'\x53\x01', False)
                self.assertEqual(result, b'\x53\x01')

    def test_multipart_frame_returns_partial(self):
        result = self.assembler.decode(frame_header(3, 2) + b'\xca\xfe', multipart_complete=False)
        self.assertIsInstance(result, PartialAssembly)
        self.assertEqual(result.frame_count, 3)
        self.assertEqual(result.current_frame, 2)
        self.assertEqual(result.part_data, b'\xca\xfe')

    def test_multipart_complete_returns_body(self):
        result = self.assembler.decode(frame_header(3, 0) + b'\xca\xfe', multipart_complete=True)
        self.assertEqual(result, b'\xca\xfe')

    def test_frame_count_limit(self):
        self.assertIsInstance(self.assembler.decode(frame_header(50, 1) + b'\x00'), PartialAssembly)
        with self.assertRaises(MalformedFrame):
            self.assembler.decode(frame_header(51, 0) + b'\x00')
        with self.assertRaises(MalformedFrame):
            self.assembler.decode(frame_header(51, 0), multipart_complete=True)

    def test_truncated_header(self):
        with self.assertRaises(MalformedFrame):
            self.assembler.decode(b'\x00\x00\x01')

    def test_describe_partial(self):
        items = self.assembler.describe(PartialAssembly(3, 1, b'\x01'))
        self.assertEqual([item['name'] for item in items], ['Frame Count', 'Current Frame', 'Part Data'])
        self.assertEqual(items[1]['value'], '1')


class TestPayloadDispatcher(unittest.TestCase):
    """Tests for routing by payload-type byte."""

    def setUp(self):
        self.dispatcher = PayloadDispatcher()

    def test_routes_ethereum(self):
        result = self.dispatcher.decode(ethereum_payload(0x00), NETWORKS)
        self.assertIsInstance(result, EthereumSigningRequest)

    def test_routes_substrate(self):
        result = self.dispatcher.decode(substrate_payload(b'\x00\x01', command=0x03), NETWORKS)
        self.assertIsInstance(result, SubstrateSigningRequest)

    def test_unknown_payload_type(self):
        with self.assertRaises(UnrecognizedPayloadType):
            self.dispatcher.decode(b'\x99' + bytes(80), NETWORKS)

    def test_empty_payload(self):
        with self.assertRaises(UnrecognizedPayloadType):
            self.dispatcher.decode(b'', NETWORKS)


class TestEthereumDecoder(unittest.TestCase):
    """Tests for the Ethereum payload layout."""

    def setUp(self):
        self.decoder = EthereumDecoder()

    def test_sign_data(self):
        result = self.decoder.decode(ethereum_payload(0x00, b'message'))
        self.assertEqual(result.action, Action.SIGN_DATA)
        self.assertEqual(result.account, bytes(range(22)).hex())
        self.assertEqual(result.payload, b'message')
        self.assertIsNone(result.rlp)

    def test_sign_transaction(self):
        rlp = bytes.fromhex('e380843b9aca0082520894')
        result = self.decoder.decode(ethereum_payload(0x01, rlp))
        self.assertEqual(result.action, Action.SIGN_TRANSACTION)
        self.assertEqual(result.rlp, rlp)

    def test_unknown_action(self):
        with self.assertRaises(MalformedAction):
            self.decoder.decode(ethereum_payload(0x02))

    def test_short_payload(self):
        with self.assertRaises(MalformedEthereumPayload):
            self.decoder.decode(b'\x45\x00' + bytes(10))


class TestSubstrateDecoder(unittest.TestCase):
    """
    Tests for the Substrate payload layout, command dispatch, oversized
    payload hashing and error reporting.
    """

    def setUp(self):
        self.decoder = SubstrateDecoder()
        self.account = ss58_encode(ALICE, 2)

    def test_sign_mortal_transaction(self):
        call_data = b'\x05\x00' + bytes(8)
        signing_payload = b'\x28' + call_data  # compact(10)
        result = self.decoder.decode(substrate_payload(signing_payload, command=0x00), NETWORKS)

        self.assertEqual(result.action, Action.SIGN_TRANSACTION)
        self.assertEqual(result.crypto, CryptoScheme.SR25519)
        self.assertFalse(result.oversized)
        self.assertFalse(result.is_hash)
        self.assertEqual(result.data, call_data)
        self.assertEqual(result.raw_payload, signing_payload)
        self.assertEqual(result.account, self.account)
        self.assertEqual(result.spec_version, 9110)
        self.assertEqual(result.genesis_hash, GENESIS_HEX)

    def test_sign_immortal_ed25519(self):
        result = self.decoder.decode(
            substrate_payload(b'\x04\xff', command=0x02, crypto=0x00), NETWORKS)
        self.assertEqual(result.action, Action.SIGN_TRANSACTION)
        self.assertEqual(result.crypto, CryptoScheme.ED25519)
        self.assertEqual(result.data, b'\xff')

    def test_oversized_transaction_is_hashed(self):
        call_data = bytes(range(256)) + bytes(44)
        signing_payload = b'\xb1\x04' + call_data  # compact(300)
        result = self.decoder.decode(substrate_payload(signing_payload), NETWORKS)

        expected = '0x' + hashlib.blake2b(call_data, digest_size=32).hexdigest()
        self.assertTrue(result.oversized)
        self.assertTrue(result.is_hash)
        self.assertEqual(result.data, expected)
        self.assertEqual(result.raw_payload, signing_payload)

    def test_oversized_boundary(self):
        """Tests that 256 signing-payload bytes are not oversized and 257 are."""
        at_limit = self.decoder.decode(substrate_payload(b'\x00' + bytes(255)), NETWORKS)
        self.assertFalse(at_limit.oversized)
        over_limit = self.decoder.decode(substrate_payload(b'\x00' + bytes(256)), NETWORKS)
        self.assertTrue(over_limit.oversized)

    def test_sign_hash(self):
        signing_payload = bytes(range(32))
        result = self.decoder.decode(substrate_payload(signing_payload, command=0x01), NETWORKS)
        self.assertEqual(result.action, Action.SIGN_DATA)
        self.assertTrue(result.is_hash)
        self.assertFalse(result.oversized)
        self.assertEqual(result.data, '0x' + signing_payload.hex())

    def test_sign_message_never_oversized(self):
        message = b'THIS IS SPARTA!' * 30
        for command in (0x01, 0x03):
            with self.subTest(command=command):
                result = self.decoder.decode(substrate_payload(message, command=command), NETWORKS)
                self.assertFalse(result.oversized)
                self.assertEqual(result.is_hash, command == 0x01)
                self.assertEqual(result.data, '0x' + message.hex())

    def test_unknown_network(self):
        with self.assertRaises(UnknownNetwork) as cm:
            self.decoder.decode(substrate_payload(b'\x00', genesis=OTHER_GENESIS), NETWORKS)
        self.assertEqual(cm.exception.genesis_hash, '0x' + OTHER_GENESIS.hex())

    def test_unknown_network_takes_precedence(self):
        """Tests that an unknown genesis hash is reported even if other bytes are bad too."""
        payload = substrate_payload(b'', command=0x09, crypto=0x07, genesis=OTHER_GENESIS)
        with self.assertRaises(UnknownNetwork):
            self.decoder.decode(payload, NETWORKS)

    def test_unknown_command(self):
        with self.assertRaises(UnrecognizedCommand):
            self.decoder.decode(substrate_payload(b'\x00', command=0x04), NETWORKS)

    def test_unknown_crypto(self):
        with self.assertRaises(UnknownCryptoScheme):
            self.decoder.decode(substrate_payload(b'\x00', crypto=0x02), NETWORKS)

        permissive = SubstrateDecoder(allow_unknown_crypto=True)
        result = permissive.decode(substrate_payload(b'\x00', crypto=0x02), NETWORKS)
        self.assertIs(result.crypto, CryptoScheme.UNKNOWN)

    def test_malformed_compact_prefix(self):
        payload = substrate_payload(b'', command=0x00)
        with self.assertRaises(MalformedSubstratePayload) as cm:
            self.decoder.decode(payload, NETWORKS)
        self.assertEqual(cm.exception.payload, payload)
        self.assertIsInstance(cm.exception.__cause__, IndexError)

    def test_hashing_failure(self):
        def failing_hasher(hex_data):
            raise RuntimeError("hasher unavailable")

        decoder = SubstrateDecoder(hasher=failing_hasher)
        with self.assertRaises(MalformedSubstratePayload) as cm:
            decoder.decode(substrate_payload(b'\x00' + bytes(300)), NETWORKS)
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)

    def test_injected_address_encoder(self):
        decoder = SubstrateDecoder(address_encoder=lambda key, prefix: f'{prefix}:{key.hex()}')
        result = decoder.decode(substrate_payload(b'\x00'), NETWORKS)
        self.assertEqual(result.account, '2:' + ALICE.hex())

    def test_short_payload(self):
        with self.assertRaises(MalformedSubstratePayload):
            self.decoder.decode(b'\x53\x01\x00' + ALICE, NETWORKS)


class TestUOSDecoder(unittest.TestCase):
    """End-to-end tests from scanned hex strings to signing requests."""

    def setUp(self):
        self.decoder = UOSDecoder(NETWORKS)

    def test_single_frame_substrate_scan(self):
        uos = frame_header(1, 0) + substrate_payload(b'\x04\x01', command=0x00, crypto=0x01)
        result = self.decoder.decode_scan(build_scan(uos))

        self.assertIsInstance(result, SubstrateSigningRequest)
        self.assertEqual(result.action, Action.SIGN_TRANSACTION)
        self.assertEqual(result.crypto, CryptoScheme.SR25519)
        self.assertEqual(result.account, ss58_encode(ALICE, 2))

    def test_single_frame_ethereum_scan(self):
        result = self.decoder.decode_scan(build_scan(frame_header() + ethereum_payload(0x01)))
        self.assertIsInstance(result, EthereumSigningRequest)

    def test_strip(self):
        self.assertEqual(self.decoder.strip(build_scan(b'\x53\x01')), b'\x53\x01')
        self.assertIsNone(self.decoder.strip('deadbeef'))

    def test_unparseable_scan(self):
        with self.assertRaises(UnparseableScan):
            self.decoder.decode_scan('deadbeef')

    def test_unknown_payload_type_scan(self):
        with self.assertRaises(UnrecognizedPayloadType):
            self.decoder.decode_scan(build_scan(frame_header() + b'\x99\x00\x00'))

    def test_multipart_scan_and_reassembly(self):
        uos = substrate_payload(b'\x00' + bytes(range(200)), command=0x00)
        chunks = [uos[i:i + 40] for i in range(0, len(uos), 40)]
        collector = FrameCollector()

        # Frames arrive out of order and one of them twice
        order = list(reversed(range(len(chunks)))) + [0]
        for index in order:
            scan = build_scan(frame_header(len(chunks), index) + chunks[index])
            result = self.decoder.decode_scan(scan)
            self.assertIsInstance(result, PartialAssembly)
            self.assertEqual(result.current_frame, index)
            self.assertEqual(result.frame_count, len(chunks))
            collector.add(result)

        self.assertTrue(collector.is_complete())
        result = self.decoder.decode_bytes(collector.reassemble(), multipart_complete=True)
        expected = self.decoder.decode_bytes(frame_header() + uos)
        self.assertEqual(result, expected)

    def test_describe(self):
        result = self.decoder.decode_scan(build_scan(frame_header() + substrate_payload(b'\x00', command=0x03)))
        names = [item['name'] for item in self.decoder.describe(result)]
        self.assertIn('Account', names)
        self.assertIn('Genesis Hash', names)


class TestFrameCollector(unittest.TestCase):
    """Tests for caller-side frame bookkeeping."""

    def setUp(self):
        self.collector = FrameCollector()

    def test_collect_in_any_order(self):
        self.assertTrue(self.collector.add(PartialAssembly(3, 2, b'\x03')))
        self.assertTrue(self.collector.add(PartialAssembly(3, 0, b'\x01')))
        self.assertEqual(self.collector.missing_frames(), [1])
        self.assertFalse(self.collector.is_complete())

        self.collector.add(PartialAssembly(3, 1, b'\x02'))
        self.assertTrue(self.collector.is_complete())
        self.assertEqual(self.collector.reassemble(), b'\x00\x00\x03\x00\x00\x01\x02\x03')

    def test_duplicate_frame(self):
        self.collector.add(PartialAssembly(2, 0, b'\x01'))
        self.assertFalse(self.collector.add(PartialAssembly(2, 0, b'\xff')))
        self.assertEqual(self.collector.parts[0], b'\x01')

    def test_frame_count_mismatch(self):
        self.collector.add(PartialAssembly(2, 0, b'\x01'))
        with self.assertRaises(MalformedFrame):
            self.collector.add(PartialAssembly(3, 1, b'\x02'))

    def test_frame_index_out_of_range(self):
        with self.assertRaises(MalformedFrame):
            self.collector.add(PartialAssembly(2, 2, b'\x01'))

    def test_reassemble_incomplete(self):
        self.collector.add(PartialAssembly(2, 1, b'\x01'))
        with self.assertRaises(MalformedFrame):
            self.collector.reassemble()

    def test_reset(self):
        self.collector.add(PartialAssembly(2, 1, b'\x01'))
        self.collector.reset()
        self.assertIsNone(self.collector.frame_count)
        self.assertEqual(self.collector.missing_frames(), [])
        self.assertFalse(self.collector.is_complete())


if __name__ == '__main__':
    unittest.main()
