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

from scalecodec.base import ScaleBytes

from txwrapper.exceptions import EncodeError, DecodeError, ConfigurationError
from txwrapper.scale.codec import encode, decode_bytes
from txwrapper.scale.era import Era, validate_era_bounds


class TestExtrinsicEra(unittest.TestCase):

    def test_era_immortal(self):
        era = Era.decode(ScaleBytes('0x00'))
        self.assertEqual(era.value, 'Immortal')
        self.assertIsNone(era.period)
        self.assertIsNone(era.phase)

    def test_era_mortal(self):
        era = Era.decode(ScaleBytes('0x4e9c'))
        self.assertDictEqual(era.value, {'Mortal': (32768, 20000)})
        self.assertEqual(era.period, 32768)
        self.assertEqual(era.phase, 20000)

        era = Era.decode(ScaleBytes('0xc503'))
        self.assertDictEqual(era.value, {'Mortal': (64, 60)})
        self.assertEqual(era.period, 64)
        self.assertEqual(era.phase, 60)

        era = Era.decode('0x8502')
        self.assertDictEqual(era.value, {'Mortal': (64, 40)})

    def test_era_methods(self):
        era = Era.create('Immortal')
        self.assertTrue(era.is_immortal())
        self.assertEqual(era.birth(1400), 0)
        self.assertEqual(era.death(1400), 2**64 - 1)

        era = Era.create({'Mortal': (256, 120)})
        self.assertFalse(era.is_immortal())
        self.assertEqual(era.birth(1400), 1400)
        self.assertEqual(era.birth(1410), 1400)
        self.assertEqual(era.birth(1399), 1144)
        self.assertEqual(era.death(1400), 1656)

    def test_era_invalid_encode(self):
        self.assertRaises(EncodeError, Era.create, ('64', 60))
        self.assertRaises(EncodeError, Era.create, 'x')
        self.assertRaises(EncodeError, Era.create, {'phase': 2})
        self.assertRaises(EncodeError, Era.create, {'period': 2})
        self.assertRaises(EncodeError, Era.create, (64,))
        self.assertRaises(EncodeError, Era, 64, 64)
        self.assertRaises(EncodeError, Era, 100, 1)

    def test_era_invalid_decode(self):
        self.assertRaises(DecodeError, Era.decode, ScaleBytes('0x0101'))
        self.assertRaises(DecodeError, Era.decode, ScaleBytes('0x85'))

    def test_era_immortal_encode(self):
        self.assertEqual(Era.create('Immortal').encode(), b'\x00')
        self.assertEqual(Era.create(None).encode(), b'\x00')
        self.assertEqual(Era.create('00').encode(), b'\x00')

    def test_era_mortal_encode(self):
        self.assertEqual(Era.create((32768, 20000)).encode().hex(), '4e9c')
        self.assertEqual(Era.create((64, 60)).encode().hex(), 'c503')
        self.assertEqual(Era.create((64, 40)).encode().hex(), '8502')

    def test_era_mortal_encode_dict(self):
        self.assertEqual(Era.create({'period': 32768, 'phase': 20000}).encode().hex(), '4e9c')
        self.assertEqual(Era.create({'period': 32768, 'current': (32768 * 3) + 20000}).encode().hex(), '4e9c')
        self.assertEqual(Era.create({'period': 200, 'current': 1400}), Era.create((256, 120)))

    def test_era_current_rounds_period_up(self):
        era = Era.create({'period': 1000, 'current': 5})
        self.assertEqual(era, Era(1024, 5))
        self.assertEqual(era.encode().hex(), '5900')

    def test_era_period_normalization(self):
        # Periods of 0 and 1 result in an immortal era
        self.assertTrue(Era.mortal(0, phase=0).is_immortal())
        self.assertTrue(Era.create((1, 120)).is_immortal())

        # Rounded up to the next power of two bucket
        self.assertEqual(Era.mortal(1000, phase=5), Era(1024, 5))

        # Clamped to the bucket bounds
        self.assertEqual(Era.mortal(2, phase=1).period, 4)
        self.assertEqual(Era.mortal(10 ** 6, phase=0).period, 65536)
        self.assertEqual(Era.mortal(1000, phase=5, min_period=2048).period, 2048)
        self.assertEqual(Era.mortal(1000, phase=5, max_period=256).period, 256)

    def test_era_phase_reduced_modulo_period(self):
        self.assertEqual(Era.create((64, 100)), Era(64, 36))
        self.assertEqual(Era.create({'period': 64, 'phase': 64}), Era(64, 0))

    def test_era_phase_quantized(self):
        # Periods above 4096 carry the phase in units of period >> 12
        era = Era.mortal(65536, phase=1234)
        self.assertEqual(era.phase, 1232)
        self.assertEqual(Era.decode(ScaleBytes(era.encode())), era)

    def test_era_scale_type(self):
        self.assertEqual(encode('Era', {'period': 64, 'current': 1000}).hex(), '8502')
        self.assertEqual(encode('Era', {'period': 1000, 'current': 5}).hex(), '5900')
        self.assertEqual(decode_bytes('Era', '0x8502'), (64, 40))
        self.assertEqual(decode_bytes('Era', '0x00'), '00')

    def test_era_from_scale_value(self):
        self.assertTrue(Era.from_scale_value('00').is_immortal())
        self.assertEqual(Era.from_scale_value((64, 40)), Era(64, 40))
        self.assertEqual(Era(64, 40).scale_value, (64, 40))
        self.assertEqual(Era.immortal().scale_value, '00')
        self.assertRaises(DecodeError, Era.from_scale_value, (64, 64))

    def test_era_bounds(self):
        validate_era_bounds(4, 65536)
        validate_era_bounds(64, 64)
        self.assertRaises(ConfigurationError, validate_era_bounds, 3, 64)
        self.assertRaises(ConfigurationError, validate_era_bounds, 2, 64)
        self.assertRaises(ConfigurationError, validate_era_bounds, 4, 2 ** 17)
        self.assertRaises(ConfigurationError, validate_era_bounds, 128, 64)


if __name__ == '__main__':
    unittest.main()
