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
from typing import Optional, Union

from scalecodec.base import ScaleBytes

from txwrapper.constants import MIN_ERA_PERIOD, MAX_ERA_PERIOD, ERA_PHASE_QUANTIZE_SHIFT
from txwrapper.exceptions import EncodeError, DecodeError, ConfigurationError
from txwrapper.scale.codec import encode, decode
from txwrapper.utils.math import next_power_of_two, is_power_of_two


def validate_era_bounds(min_period: int, max_period: int):
    """
    Checks configured mortal era buckets: powers of two within the encodable range [4, 2**16]
    """
    for name, value in (('min_era_period', min_period), ('max_era_period', max_period)):
        if type(value) is not int or not is_power_of_two(value):
            raise ConfigurationError(f'{name} must be a power of two, got {value}')
        if not MIN_ERA_PERIOD <= value <= MAX_ERA_PERIOD:
            raise ConfigurationError(f'{name} must be between {MIN_ERA_PERIOD} and {MAX_ERA_PERIOD}, got {value}')

    if min_period > max_period:
        raise ConfigurationError('min_era_period cannot be larger than max_era_period')


class Era:
    """
    Validity window of a transaction: Immortal, or Mortal with a period (power of two) and the phase of the
    checkpoint block within that period. The two byte wire format is handled by scalecodec's `Era` type.
    """

    def __init__(self, period: Optional[int] = None, phase: Optional[int] = None):
        if period is not None or phase is not None:
            if type(period) is not int or type(phase) is not int:
                raise EncodeError('Phase and period must be ints')
            if not is_power_of_two(period) or not MIN_ERA_PERIOD <= period <= MAX_ERA_PERIOD:
                raise EncodeError(f'Invalid era period {period}')
            if not 0 <= phase < period:
                raise EncodeError(f'Phase {phase} must be less than period {period}')
        self.period = period
        self.phase = phase

    @classmethod
    def immortal(cls) -> 'Era':
        return cls()

    @classmethod
    def mortal(cls, period: int, phase: int = None, current: int = None,
               min_period: int = MIN_ERA_PERIOD, max_period: int = MAX_ERA_PERIOD) -> 'Era':
        """
        Creates a mortal era, normalizing the requested period to the nearest power of two bucket >= period
        (clamped to [min_period, max_period]) and reducing the phase modulo that period. When `phase` is omitted it
        is derived from `current`, the number of the checkpoint block.

        A period of 0 or 1 results in an immortal era.
        """
        if type(period) is not int or period < 0:
            raise EncodeError(f'Era period must be a non-negative int, got {period}')

        if period in (0, 1):
            return cls.immortal()

        period = max(min_period, min(max_period, next_power_of_two(period)))

        if phase is None:
            if current is None:
                raise EncodeError("Mortal era requires either 'phase' or 'current'")
            phase = current

        if type(phase) is not int or phase < 0:
            raise EncodeError(f'Era phase must be a non-negative int, got {phase}')

        phase = phase % period
        quantize_factor = max(1, period >> ERA_PHASE_QUANTIZE_SHIFT)

        return cls(period, (phase // quantize_factor) * quantize_factor)

    @classmethod
    def create(cls, value: Union[str, dict, tuple, 'Era', None],
               min_period: int = MIN_ERA_PERIOD, max_period: int = MAX_ERA_PERIOD) -> 'Era':
        """
        Accepts 'Immortal', None, an Era, (period, phase), {'period': p, 'phase': x}, {'period': p, 'current': n}
        or {'Mortal': ...}
        """
        if isinstance(value, Era):
            return value

        if value is None or value in ('Immortal', '00', '0x00'):
            return cls.immortal()

        if type(value) in (tuple, list):
            if len(value) != 2:
                raise EncodeError('Mortal era tuple must be (period, phase)')
            return cls.mortal(value[0], phase=value[1], min_period=min_period, max_period=max_period)

        if type(value) is dict:
            if 'Mortal' in value:
                return cls.create(value['Mortal'], min_period=min_period, max_period=max_period)
            if 'Immortal' in value:
                return cls.immortal()
            if 'period' not in value:
                raise EncodeError("Value missing required field 'period' in dict Era")
            if 'phase' not in value and 'current' not in value:
                raise EncodeError("Dict Era must have one of the fields 'phase' or 'current'")
            return cls.mortal(
                value['period'], phase=value.get('phase'), current=value.get('current'),
                min_period=min_period, max_period=max_period
            )

        raise EncodeError(f'Incorrect value for Era: {value!r}')

    @classmethod
    def from_scale_value(cls, value: Union[str, tuple]) -> 'Era':
        """
        Converts the value of a decoded scalecodec `Era`, '00' or (period, phase)
        """
        if value == '00':
            return cls.immortal()
        try:
            return cls(*value)
        except EncodeError as e:
            raise DecodeError(str(e)) from e

    @property
    def scale_value(self) -> Union[str, tuple]:
        if self.is_immortal():
            return '00'
        return self.period, self.phase

    def encode(self) -> bytes:
        return encode('Era', self.scale_value)

    @classmethod
    def decode(cls, data: Union[ScaleBytes, bytes, str]) -> 'Era':
        value, _ = decode('Era', data)
        return cls.from_scale_value(value)

    def is_immortal(self) -> bool:
        """Returns true if the era is immortal, false if mortal."""
        return self.period is None or self.phase is None

    def birth(self, current: int) -> int:
        """Gets the block number of the start of the era given, with `current`
        as the reference block number for the era, normally included as part
        of the transaction.
        """
        if self.is_immortal():
            return 0
        return (max(current, self.phase) - self.phase) // self.period * self.period + self.phase

    def death(self, current: int) -> int:
        """Gets the block number of the first block at which the era has ended.

        If the era is immortal, 2**64 - 1 (the maximum unsigned 64-bit integer) is returned.
        """
        if self.is_immortal():
            return 2**64 - 1
        return self.birth(current) + self.period

    @property
    def value(self) -> Union[str, dict]:
        if self.is_immortal():
            return 'Immortal'
        return {'Mortal': (self.period, self.phase)}

    def __eq__(self, other):
        if not isinstance(other, Era):
            return NotImplemented
        return self.period == other.period and self.phase == other.phase

    def __hash__(self):
        return hash((self.period, self.phase))

    def __repr__(self):
        return f'<Era {self.value}>'
