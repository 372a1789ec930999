# Python Substrate TxWrapper Library
#
# Copyright 2018-2024 Stichting Polkascan (Polkascan Foundation).
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
import unittest

from scalecodec.utils.ss58 import ss58_decode

from txwrapper.exceptions import EncodeError
from txwrapper.scale.codec import encode, decode, decode_bytes
from txwrapper.scale.metadata import Metadata
from test.fixtures import METADATA_V14_HEX, ALICE_PUBLIC_KEY, ALICE_ADDRESS, ALICE_POLKADOT_ADDRESS, \
    ETHEREUM_ACCOUNT


class TestMultiAddress(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.metadata = Metadata.parse(METADATA_V14_HEX)

    def test_multiaddress_ss58_address_as_str(self):
        ss58_address = "CdVuGwX71W4oRbXHsLuLQxNPns23rnSSiZwZPN4etWf6XYo"

        public_key = ss58_decode(ss58_address)

        data = encode('Address', ss58_address, metadata=self.metadata)
        self.assertEqual(f'0x00{public_key}', f'0x{data.hex()}')

        value, consumed = decode('Address', data, metadata=Metadata.parse(METADATA_V14_HEX, ss58_format=2))
        self.assertEqual(ss58_address, value)
        self.assertEqual(33, consumed)

    def test_multiaddress_account_id(self):
        # Decoding renders the account in the ss58 format of the metadata
        value = decode_bytes('Address', f'0x00{ALICE_PUBLIC_KEY[2:]}', metadata=self.metadata)
        self.assertEqual(ALICE_ADDRESS, value)

        metadata = Metadata.parse(METADATA_V14_HEX, ss58_format=0)
        value = decode_bytes('Address', f'0x00{ALICE_PUBLIC_KEY[2:]}', metadata=metadata)
        self.assertEqual(ALICE_POLKADOT_ADDRESS, value)

        # Encoding
        expected = bytes.fromhex(f'00{ALICE_PUBLIC_KEY[2:]}')
        self.assertEqual(expected, encode('Address', ALICE_PUBLIC_KEY, metadata=self.metadata))
        self.assertEqual(expected, encode('Address', ALICE_ADDRESS, metadata=self.metadata))
        self.assertEqual(expected, encode('Address', {'Id': ALICE_PUBLIC_KEY}, metadata=self.metadata))

    def test_multiaddress_account_id_without_ss58_format(self):
        metadata = Metadata.parse(METADATA_V14_HEX, ss58_format=None)
        value = decode_bytes('Address', f'0x00{ALICE_PUBLIC_KEY[2:]}', metadata=metadata)
        self.assertEqual(ALICE_PUBLIC_KEY, value)

    def test_multiaddress_index(self):
        value = decode_bytes('Address', '0x0104', metadata=self.metadata)
        self.assertEqual(1, value)

        self.assertEqual(bytes.fromhex('0104'), encode('Address', 1, metadata=self.metadata))
        self.assertEqual(bytes.fromhex('0104'), encode('Address', {'Index': 1}, metadata=self.metadata))

    def test_multiaddress_address20(self):
        value = decode_bytes('Address', f'0x04{ETHEREUM_ACCOUNT[2:]}', metadata=self.metadata)
        self.assertEqual({'Address20': ETHEREUM_ACCOUNT}, value)

        self.assertEqual(
            bytes.fromhex(f'04{ETHEREUM_ACCOUNT[2:]}'), encode('Address', ETHEREUM_ACCOUNT, metadata=self.metadata)
        )

    def test_multiaddress_address32(self):
        value = decode_bytes('Address', f'0x03{ALICE_PUBLIC_KEY[2:]}', metadata=self.metadata)
        self.assertEqual({'Address32': ALICE_PUBLIC_KEY}, value)

        self.assertEqual(
            bytes.fromhex(f'03{ALICE_PUBLIC_KEY[2:]}'),
            encode('Address', {'Address32': ALICE_PUBLIC_KEY}, metadata=self.metadata)
        )

    def test_multiaddress_bytes_cap(self):
        raw = '0x' + 'ff' * 45

        value = decode_bytes('Address', f'0x02b4{raw[2:]}', metadata=self.metadata)
        self.assertEqual({'Raw': raw}, value)

        self.assertEqual(
            bytes.fromhex(f'02b4{raw[2:]}'), encode('Address', {'Raw': raw}, metadata=self.metadata)
        )

        # Only 32 and 20 byte hex strings imply a variant
        with self.assertRaises(EncodeError):
            encode('Address', raw, metadata=self.metadata)

    def test_multiaddress_invalid_ss58(self):
        with self.assertRaises(EncodeError):
            encode('Address', 'not an address', metadata=self.metadata)

    def test_multiaddress_without_metadata(self):
        data = encode('MultiAddress', ALICE_ADDRESS)
        self.assertEqual(bytes.fromhex(f'00{ALICE_PUBLIC_KEY[2:]}'), data)
        self.assertEqual(ALICE_ADDRESS, decode_bytes('MultiAddress', data))


class TestAccountId(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.metadata = Metadata.parse(METADATA_V14_HEX)

    def test_account_id_ss58_format(self):
        data = encode('AccountId', ALICE_ADDRESS, metadata=self.metadata)
        self.assertEqual(ALICE_PUBLIC_KEY, f'0x{data.hex()}')

        value = decode_bytes('AccountId', ALICE_PUBLIC_KEY, metadata=self.metadata)
        self.assertEqual(ALICE_ADDRESS, value)

        value = decode_bytes('AccountId', ALICE_PUBLIC_KEY, metadata=Metadata.parse(METADATA_V14_HEX, ss58_format=None))
        self.assertEqual(ALICE_PUBLIC_KEY, value)

    def test_account_id_20(self):
        type_string = self.metadata.resolve_type('AccountId20')

        self.assertEqual(bytes.fromhex(ETHEREUM_ACCOUNT[2:]), encode(type_string, ETHEREUM_ACCOUNT, metadata=self.metadata))
        self.assertEqual(ETHEREUM_ACCOUNT, decode_bytes(type_string, ETHEREUM_ACCOUNT, metadata=self.metadata))

    def test_account_id_invalid_length(self):
        with self.assertRaises(EncodeError):
            encode('AccountId', '0x1234', metadata=self.metadata)


if __name__ == '__main__':
    unittest.main()
