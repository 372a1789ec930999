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
from typing import Union

from scalecodec.base import ScaleBytes

from txwrapper.exceptions import ArgumentTypeError
from txwrapper.scale.codec import encode, decode
from txwrapper.utils.hasher import blake2_256

__all__ = ['encode_call', 'decode_call', 'get_call_hash']


def encode_call(metadata: 'Metadata', call_module: str, call_function: str, call_args: dict = None) -> bytes:
    """
    Encodes a call: module index byte, call index byte and the arguments in declared order

    Parameters
    ----------
    metadata: Metadata used to resolve the call
    call_module: exact lowerCamel module name, e.g. 'balances'
    call_function: exact call name, e.g. 'transfer_keep_alive'
    call_args: dict with exactly the declared argument names

    Returns
    -------
    bytes
    """
    if call_args is None:
        call_args = {}

    if type(call_args) is not dict:
        raise ArgumentTypeError(f'Call arguments must be a dict, got {type(call_args).__name__}')

    return encode('Call', {
        'call_module': call_module,
        'call_function': call_function,
        'call_args': call_args
    }, metadata=metadata)


def decode_call(metadata: 'Metadata', data: Union[ScaleBytes, bytes, str]) -> dict:
    """
    Decodes a call at the current offset of the cursor. An index pair unknown to the metadata raises
    `UnknownCallError`.

    Returns
    -------
    dict with 'call_index', 'call_module', 'call_function' and 'call_args'
    """
    value, _ = decode('Call', data, metadata=metadata)
    return value


def get_call_hash(call_data: bytes) -> str:
    return f'0x{blake2_256(call_data).hex()}'
