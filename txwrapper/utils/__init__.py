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


def hex_to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """
    Converts a `0x`-prefixed (or bare) hex string to bytes, passes bytes through
    """
    if type(value) in (bytes, bytearray):
        return bytes(value)
    if type(value) is not str:
        raise TypeError(f"Expected hex string or bytes, got {type(value).__name__}")
    if value[0:2] == '0x':
        value = value[2:]
    return bytes.fromhex(value)


def bytes_to_hex(value: Union[bytes, bytearray]) -> str:
    return f'0x{bytes(value).hex()}'


def lower_camel_case(name: str) -> str:
    """
    Converts a metadata module name to its lowerCamel form, e.g. 'Balances' -> 'balances', 'EVM' -> 'evm' and
    'XcmPallet' -> 'xcmPallet'
    """
    prefix_length = 0
    while prefix_length < len(name) and name[prefix_length].isupper():
        prefix_length += 1

    if prefix_length == 0:
        return name

    if 1 < prefix_length < len(name) and name[prefix_length].islower():
        # Last capital starts the next word, e.g. 'XCMPallet' -> 'xcmPallet'
        prefix_length -= 1

    return name[:prefix_length].lower() + name[prefix_length:]
