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
from typing import Optional

from scalecodec.base import RuntimeConfigurationObject, ScaleBytes
from scalecodec.exceptions import InvalidScaleTypeValueException, RemainingScaleBytesNotEmptyException
from scalecodec.type_registry import load_type_registry_preset
from scalecodec.types import Compact, Vec, BoundedVec, BitVec, Enum, Option, GenericCall, U8, U16, U32, U64, U128, \
    U256

from txwrapper.constants import DEFAULT_SS58_FORMAT, MAX_ZERO_SIZED_ELEMENTS, RUNTIME_CALL_PATHS
from txwrapper.exceptions import TxWrapperException, EncodeError, DecodeError, ArgumentTypeError, \
    MissingArgumentError, UnexpectedArgumentError, UnknownCallError
from txwrapper.utils.hasher import blake2_256

__all__ = [
    'SCALE_ERRORS', 'TYPE_REGISTRY', 'TxWrapperRuntimeConfiguration', 'CheckedCompact', 'CheckedEnum',
    'CheckedOption', 'CappedVec', 'CappedBoundedVec', 'CappedBitVec', 'GenericRuntimeCall'
]

# Exceptions scalecodec raises for values or bytes that do not fit a type
SCALE_ERRORS = (
    ValueError, TypeError, KeyError, IndexError, OverflowError, NotImplementedError,
    InvalidScaleTypeValueException, RemainingScaleBytesNotEmptyException
)

INTEGER_BIT_LENGTHS = ((U8, 8), (U16, 16), (U32, 32), (U64, 64), (U128, 128), (U256, 256))


def check_element_count(scale_obj, bits_per_element: int = 8):
    """
    Peeks the Compact<u32> element count at the current offset and raises `DecodeError` when the remaining data
    cannot hold that many elements
    """
    offset = scale_obj.data.offset
    element_count = scale_obj.process_type('Compact<u32>').value
    scale_obj.data.offset = offset

    remaining = scale_obj.data.length - offset
    max_elements = max(remaining * 8 // bits_per_element, MAX_ZERO_SIZED_ELEMENTS)

    if element_count > max_elements:
        raise DecodeError(f'Sequence length {element_count} exceeds remaining data ({remaining} bytes)')


class CheckedCompact(Compact):
    """
    Compact integer that rejects over-long encodings and values exceeding the width of its integer type
    """

    def get_bit_length(self) -> Optional[int]:
        if self.sub_type:
            decoder_class = self.runtime_config.get_decoder_class(self.sub_type)
            if decoder_class is not None:
                for int_class, bit_length in INTEGER_BIT_LENGTHS:
                    if issubclass(decoder_class, int_class):
                        return bit_length

    def check_range(self, value: int, exception_class):
        bit_length = self.get_bit_length()
        if bit_length is not None and value >= 2 ** bit_length:
            raise exception_class(f'{value} out of range for Compact<u{bit_length}>')

    def process(self):
        value = super().process()

        if self.data.offset > self.data.length:
            raise DecodeError('Not enough data to decode compact integer')

        if len(super().process_encode(value).data) != self.data.offset - self.data_start_offset:
            raise DecodeError(f'Non-canonical compact encoding of {value}')

        self.check_range(value, DecodeError)

        return value

    def process_encode(self, value):
        if type(value) is not int:
            raise EncodeError(f'Compact integer expected, got {value!r}')

        if value < 0:
            raise EncodeError(f'{value} out of range for compact integer')

        self.check_range(value, EncodeError)

        return super().process_encode(value)


class CappedVec(Vec):

    def process(self):
        check_element_count(self)
        return super().process()


class CappedBoundedVec(BoundedVec):

    def process(self):
        check_element_count(self)
        return super().process()


class CappedBitVec(BitVec):

    def process(self):
        check_element_count(self, bits_per_element=1)
        return super().process()


class CheckedEnum(Enum):
    """
    Enum that rejects variant indices without a declared variant
    """

    def process(self):
        value = super().process()

        if self.type_mapping and self.type_mapping[self.index][0] is None:
            raise DecodeError(f'Variant index {self.index} not found in {self.__class__.__name__}')

        return value


class CheckedOption(Option):

    def process(self):
        option_byte = self.data.data[self.data.offset:self.data.offset + 1]

        if option_byte not in (b'\x00', b'\x01'):
            raise DecodeError(f'Invalid Option flag 0x{option_byte.hex()}')

        return super().process()


class GenericRuntimeCall(GenericCall):
    """
    Runtime call resolved through the call tables of `Metadata`: module index, call index and the arguments in
    declared order. Encodes from {'call_module': .., 'call_function': .., 'call_args': ..},
    {'module': {'call': {args}}} or pre-encoded call bytes (or hex), which are validated by decoding them.
    """

    def get_call_metadata(self):
        return self.metadata or getattr(self.runtime_config, 'metadata', None)

    def process(self):
        metadata = self.get_call_metadata()

        if metadata is None:
            raise DecodeError('Metadata is required to decode a call')

        call_index = self.get_next_bytes(2)

        if len(call_index) != 2:
            raise DecodeError('Not enough data to decode call index')

        call = metadata.resolve_call_index(call_index[0], call_index[1])

        self.call_index = call_index.hex()
        self.call_module = call.module_name
        self.call_function = call.call_name
        self.call_args = {}

        for arg in call.args:
            try:
                arg_obj = self.process_type(arg.type_string, metadata=metadata)
            except DecodeError as e:
                raise DecodeError(f"Parameter '{arg.name}' of {call.module_name}.{call.call_name}: {e}") from e
            except TxWrapperException:
                raise
            except SCALE_ERRORS as e:
                raise DecodeError(f"Parameter '{arg.name}' of {call.module_name}.{call.call_name}: {e}") from e

            if self.data.offset > self.data.length:
                raise DecodeError(f"Parameter '{arg.name}' of {call.module_name}.{call.call_name}: not enough data")

            self.call_args[arg.name] = arg_obj.value

        self.call_hash = f'0x{blake2_256(self.data.data[self.data_start_offset:self.data.offset]).hex()}'

        return {
            'call_index': f'0x{self.call_index}',
            'call_module': self.call_module,
            'call_function': self.call_function,
            'call_args': self.call_args
        }

    def process_encode(self, value):
        metadata = self.get_call_metadata()

        if metadata is None:
            raise EncodeError('Metadata is required to encode a call')

        if type(value) in (bytes, bytearray) or (type(value) is str and value[0:2] == '0x'):
            return self.process_encode_call_bytes(metadata, value)

        if type(value) is dict and 'call_module' in value:
            if 'call_function' not in value:
                raise EncodeError("Call is missing 'call_function'")
            call_module = value['call_module']
            call_function = value['call_function']
            call_args = value.get('call_args')

        elif type(value) is dict and len(value) == 1:
            call_module, call = next(iter(value.items()))
            if type(call) is str:
                call_function, call_args = call, None
            elif type(call) is dict and len(call) == 1:
                call_function, call_args = next(iter(call.items()))
            else:
                raise EncodeError(f'Incorrect value for call: {value!r}')
        else:
            raise EncodeError(f'Incorrect value for call: {value!r}')

        if call_args is None:
            call_args = {}

        if type(call_args) is not dict:
            raise ArgumentTypeError(f'Call arguments must be a dict, got {type(call_args).__name__}')

        call = metadata.resolve_call(call_module, call_function)

        for arg in call.args:
            if arg.name not in call_args:
                raise MissingArgumentError(
                    f"Parameter '{arg.name}' not specified for {call.module_name}.{call.call_name}",
                    argument_name=arg.name
                )

        arg_names = call.arg_names
        for name in call_args:
            if name not in arg_names:
                raise UnexpectedArgumentError(
                    f"Unexpected parameter '{name}' for {call.module_name}.{call.call_name}", argument_name=name
                )

        self.call_index = f'{call.module_index:02x}{call.call_index:02x}'
        self.call_module = call.module_name
        self.call_function = call.call_name
        self.call_args = {}

        data = ScaleBytes(bytearray([call.module_index, call.call_index]))

        for arg in call.args:
            arg_obj = self.runtime_config.create_scale_object(arg.type_string, metadata=metadata)
            try:
                data += arg_obj.encode(call_args[arg.name])
            except (MissingArgumentError, ArgumentTypeError):
                raise
            except EncodeError as e:
                raise ArgumentTypeError(
                    f"Parameter '{arg.name}' of {call.module_name}.{call.call_name} ({arg.type_name}): {e}",
                    argument_name=arg.name
                ) from e
            except TxWrapperException:
                raise
            except SCALE_ERRORS as e:
                raise ArgumentTypeError(
                    f"Parameter '{arg.name}' of {call.module_name}.{call.call_name} ({arg.type_name}): {e}",
                    argument_name=arg.name
                ) from e

            self.call_args[arg.name] = arg_obj

        self.call_hash = f'0x{blake2_256(data.data).hex()}'

        return data

    def process_encode_call_bytes(self, metadata, value) -> ScaleBytes:
        try:
            data = ScaleBytes(bytearray(value) if type(value) is not str else value)
            call_obj = self.__class__(data=data, metadata=metadata, runtime_config=self.runtime_config)
            call_obj.decode()
        except UnknownCallError:
            raise
        except (DecodeError, *SCALE_ERRORS) as e:
            raise EncodeError(f'Invalid encoded call: {e}') from e

        self.call_index = call_obj.call_index
        self.call_module = call_obj.call_module
        self.call_function = call_obj.call_function
        self.call_args = call_obj.call_args
        self.call_hash = call_obj.call_hash

        return ScaleBytes(bytearray(data.data))


METADATA_V15_TYPES = {
    'MetadataV15': {
        'type': 'struct',
        'type_mapping': [
            ['types', 'PortableRegistry'],
            ['pallets', 'Vec<PalletMetadataV15>'],
            ['extrinsic', 'ExtrinsicMetadataV15'],
            ['runtime_type', 'SiLookupTypeId'],
            ['apis', 'Vec<RuntimeApiMetadataV15>'],
            ['outer_enums', 'OuterEnums15'],
            ['custom', 'CustomMetadata15'],
        ]
    },
    'PalletMetadataV15': {
        'type': 'struct',
        'base_class': 'ScaleInfoPalletMetadata',
        'type_mapping': [
            ['name', 'Text'],
            ['storage', 'Option<StorageMetadataV14>'],
            ['calls', 'Option<PalletCallMetadataV14>'],
            ['event', 'Option<PalletEventMetadataV14>'],
            ['constants', 'Vec<PalletConstantMetadataV14>'],
            ['error', 'Option<PalletErrorMetadataV14>'],
            ['index', 'u8'],
            ['docs', 'Vec<Text>'],
        ]
    },
    'ExtrinsicMetadataV15': {
        'type': 'struct',
        'type_mapping': [
            ['version', 'u8'],
            ['address_type', 'SiLookupTypeId'],
            ['call_type', 'SiLookupTypeId'],
            ['signature_type', 'SiLookupTypeId'],
            ['extra_type', 'SiLookupTypeId'],
            ['signed_extensions', 'Vec<SignedExtensionMetadataV14>'],
        ]
    },
    'RuntimeApiMetadataV15': {
        'type': 'struct',
        'type_mapping': [
            ['name', 'Text'],
            ['methods', 'Vec<RuntimeApiMethodMetadataV15>'],
            ['docs', 'Vec<Text>'],
        ]
    },
    'RuntimeApiMethodMetadataV15': {
        'type': 'struct',
        'type_mapping': [
            ['name', 'Text'],
            ['inputs', 'Vec<RuntimeApiMethodParamMetadataV15>'],
            ['output', 'SiLookupTypeId'],
            ['docs', 'Vec<Text>'],
        ]
    },
    'RuntimeApiMethodParamMetadataV15': {
        'type': 'struct',
        'type_mapping': [
            ['name', 'Text'],
            ['type', 'SiLookupTypeId'],
        ]
    },
    'OuterEnums15': {
        'type': 'struct',
        'type_mapping': [
            ['call_type', 'SiLookupTypeId'],
            ['event_type', 'SiLookupTypeId'],
            ['error_type', 'SiLookupTypeId'],
        ]
    },
    'CustomMetadata15': {
        'type': 'struct',
        'type_mapping': [
            ['map', 'Vec<(Text, CustomValueMetadata15)>'],
        ]
    },
    'CustomValueMetadata15': {
        'type': 'struct',
        'type_mapping': [
            ['type', 'SiLookupTypeId'],
            ['value', 'Bytes'],
        ]
    },
    'MetadataAll': {
        'type': 'enum',
        'base_class': 'GenericMetadataAll',
        'type_mapping': [[f'V{version}', f'TypeNotSupported<MetadataV{version}>'] for version in range(0, 14)] + [
            ['V14', 'MetadataV14'],
            ['V15', 'MetadataV15'],
        ]
    },
}

EXTRINSIC_TYPES = {
    # Signing payload, also decoded as the bare payload candidate
    'ExtrinsicPayloadValue': {
        'type': 'struct',
        'type_mapping': [
            ['call', 'Call'],
            ['era', 'Era'],
            ['nonce', 'Compact<Index>'],
            ['tip', 'Compact<Balance>'],
            ['spec_version', 'u32'],
            ['transaction_version', 'u32'],
            ['genesis_hash', 'Hash'],
            ['block_hash', 'Hash'],
        ]
    },
    # Envelope fields after the version byte
    'UnsignedExtrinsicV4': {
        'type': 'struct',
        'type_mapping': [
            ['address', 'Address'],
            ['era', 'Era'],
            ['nonce', 'Compact<Index>'],
            ['tip', 'Compact<Balance>'],
            ['spec_version', 'u32'],
            ['transaction_version', 'u32'],
            ['genesis_hash', 'Hash'],
            ['block_hash', 'Hash'],
            ['call', 'Call'],
        ]
    },
    'SignedExtrinsicV4': {
        'type': 'struct',
        'type_mapping': [
            ['address', 'Address'],
            ['signature', 'ExtrinsicSignature'],
            ['era', 'Era'],
            ['nonce', 'Compact<Index>'],
            ['tip', 'Compact<Balance>'],
            ['call', 'Call'],
        ]
    },
}

# Stricter replacements of scalecodec's generic types, registered before the core preset so its aliases use them
CODEC_TYPES = {
    'Compact': 'CheckedCompact',
    'Enum': 'CheckedEnum',
    'Option': 'CheckedOption',
    'Vec': 'CappedVec',
    'BitVec': 'CappedBitVec',
    'BoundedVec': 'CappedBoundedVec',
    'sp_core::bounded::bounded_vec::BoundedVec': 'CappedBoundedVec',
    'sp_core::bounded::weak_bounded_vec::WeakBoundedVec': 'CappedBoundedVec',
    'frame_support::storage::weak_bounded_vec::WeakBoundedVec': 'CappedBoundedVec',
    'frame_support::storage::bounded_vec::BoundedVec': 'CappedBoundedVec',
}

TYPE_REGISTRY = {
    'types': {
        **CODEC_TYPES,
        'Call': 'GenericRuntimeCall',
        'ExtrinsicSignature': 'MultiSignature',
        **{path: 'GenericRuntimeCall' for path in RUNTIME_CALL_PATHS},
        **METADATA_V15_TYPES,
        **EXTRINSIC_TYPES
    }
}


class TxWrapperRuntimeConfiguration(RuntimeConfigurationObject):
    """
    scalecodec runtime configuration with the core type registry preset and the types of this library. When
    created for a `Metadata` instance, runtime calls are resolved through that metadata.
    """

    def __init__(self, ss58_format: Optional[int] = DEFAULT_SS58_FORMAT, metadata=None):
        super().__init__(ss58_format=ss58_format, implements_scale_info=metadata is not None)
        self.metadata = metadata

        self.update_type_registry_types(CODEC_TYPES)
        self.update_type_registry(load_type_registry_preset(name='core'))
        self.update_type_registry(TYPE_REGISTRY)

    def create_scale_object(self, type_string: str, data: Optional[ScaleBytes] = None, **kwargs):
        # Objects keep this configuration instead of the one last attached to their shared class
        kwargs.setdefault('runtime_config', self)
        return super().create_scale_object(type_string, data=data, **kwargs)
