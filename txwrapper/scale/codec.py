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
"""
Entry points of the SCALE codec. Encoding and decoding is done by `scalecodec` type classes, resolved by type string
(e.g. 'u32', 'Compact<Balance>', 'scale_info::12') in the runtime configuration of given metadata, or in a
metadata independent configuration for the chain agnostic types. Errors are mapped onto `EncodeError`,
`DecodeError` and `UnknownTypeError`.
"""
from functools import lru_cache
from typing import Any, Optional, Tuple, Union

from scalecodec.base import ScaleBytes

from txwrapper.constants import DEFAULT_SS58_FORMAT
from txwrapper.exceptions import TxWrapperException, EncodeError, DecodeError, UnknownTypeError
from txwrapper.scale.types import SCALE_ERRORS, TxWrapperRuntimeConfiguration

__all__ = ['encode', 'decode', 'decode_bytes', 'encode_compact', 'to_scale_bytes', 'get_runtime_config']


@lru_cache(maxsize=None)
def get_runtime_config(ss58_format: Optional[int] = DEFAULT_SS58_FORMAT) -> TxWrapperRuntimeConfiguration:
    """
    Runtime configuration without metadata, shared per ss58 format
    """
    return TxWrapperRuntimeConfiguration(ss58_format=ss58_format)


def to_scale_bytes(data: Union[ScaleBytes, bytes, bytearray, str]) -> ScaleBytes:
    if isinstance(data, ScaleBytes):
        return data
    if type(data) is str and data[0:2] != '0x':
        data = f'0x{data}'
    try:
        return ScaleBytes(data)
    except ValueError as e:
        raise DecodeError(str(e)) from e


def create_scale_object(type_string: str, data: ScaleBytes = None, metadata: 'Metadata' = None):
    runtime_config = metadata.runtime_config if metadata is not None else get_runtime_config()

    try:
        return runtime_config.create_scale_object(type_string, data=data)
    except NotImplementedError:
        raise UnknownTypeError(f"Type '{type_string}' not found", type_name=type_string)


def encode(type_string: str, value: Any, metadata: 'Metadata' = None) -> bytes:
    """
    Encodes `value` as given type

    Parameters
    ----------
    type_string: scalecodec type string, e.g. 'Compact<u128>' or a type string returned by `Metadata.resolve_type`
    value: Python value in the shape of the type (int, bool, str, dict, tuple, list, hex string, ...)
    metadata: Metadata to resolve runtime specific types and calls, optional for chain agnostic types

    Returns
    -------
    bytes
    """
    scale_obj = create_scale_object(type_string, metadata=metadata)

    try:
        return bytes(scale_obj.encode(value).data)
    except TxWrapperException:
        raise
    except SCALE_ERRORS as e:
        raise EncodeError(f'Failed to encode {type_string}: {e}') from e


def decode(type_string: str, data: Union[ScaleBytes, bytes, str], metadata: 'Metadata' = None) -> Tuple[Any, int]:
    """
    Decodes a value of given type at the current offset of the cursor

    Parameters
    ----------
    type_string: scalecodec type string
    data: ScaleBytes cursor, shared between chained decodes
    metadata: Metadata to resolve runtime specific types and calls

    Returns
    -------
    tuple of (value, amount of bytes consumed)
    """
    data = to_scale_bytes(data)
    start_offset = data.offset

    scale_obj = create_scale_object(type_string, data=data, metadata=metadata)

    try:
        value = scale_obj.decode(check_remaining=False)
    except TxWrapperException:
        raise
    except SCALE_ERRORS as e:
        raise DecodeError(f'Failed to decode {type_string}: {e}') from e

    if scale_obj.data.offset > scale_obj.data.length:
        raise DecodeError(f'Unexpected end of data while decoding {type_string}')

    return value, scale_obj.data.offset - start_offset


def decode_bytes(type_string: str, data: Union[ScaleBytes, bytes, str], metadata: 'Metadata' = None) -> Any:
    """
    Decodes a complete byte string; remaining bytes after the value are an error
    """
    data = to_scale_bytes(data)
    value, _ = decode(type_string, data, metadata=metadata)

    if data.offset != data.length:
        raise DecodeError(f'{data.length - data.offset} bytes remaining after decoding {type_string}')

    return value


def encode_compact(value: int) -> bytes:
    return encode('Compact<u32>', value)
