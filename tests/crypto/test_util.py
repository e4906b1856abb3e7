from nanowallet.crypto.util import (
    decode_address,
    get_address_b58_from_bytes,
    get_address_from_seed,
    get_random_address,
)
from nanowallet.exception import InvalidAddressError
from tests import unittest


class CryptoUtilTest(unittest.TestCase):
    def test_address_b58(self):
        address = get_random_address()
        self.assertEqual(len(address), 20)
        self.assertEqual(decode_address(get_address_b58_from_bytes(address)), address)

    def test_invalid_addresses(self):
        with self.assertRaises(InvalidAddressError):
            decode_address('0OIl')
        with self.assertRaises(InvalidAddressError):
            decode_address(get_address_b58_from_bytes(b'\x01' * 19))

    def test_address_from_seed(self):
        self.assertEqual(get_address_from_seed(b'alice'), get_address_from_seed(b'alice'))
        self.assertNotEqual(get_address_from_seed(b'alice'), get_address_from_seed(b'bob'))
        self.assertEqual(len(get_address_from_seed(b'alice')), 20)
