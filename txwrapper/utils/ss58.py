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
#
#  ss58.py

""" SS58 is a simple address format designed for Substrate based chains.
    Encoding/decoding according to specification on
    https://github.com/paritytech/substrate/wiki/External-Address-Format-(SS58)

    Ethereum style 20 byte accounts have no SS58 representation and are rendered as plain hex.
"""
from typing import Union

from scalecodec.utils.ss58 import ss58_decode, ss58_encode, is_valid_ss58_address, get_ss58_format

from txwrapper.constants import DEFAULT_SS58_FORMAT
from txwrapper.utils import hex_to_bytes, bytes_to_hex

__all__ = [
    'derive_address', 'decode_address', 'ss58_decode', 'ss58_encode', 'is_valid_ss58_address', 'get_ss58_format'
]


def derive_address(public_key: Union[str, bytes], ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
    """
    Derives the textual address of a public key for the network identified by `ss58_format`

    Parameters
    ----------
    public_key: 32 bytes (or 20 bytes for Ethereum style accounts), as bytes or hex string
    ss58_format: network prefix, e.g. 0 for Polkadot, 2 for Kusama and 42 for Westend and generic Substrate chains

    Returns
    -------
    str
    """
    public_key = hex_to_bytes(public_key)

    if len(public_key) == 20:
        return bytes_to_hex(public_key)

    return ss58_encode(public_key, ss58_format=ss58_format)


def decode_address(address: str, ss58_format: int = None) -> str:
    """
    Returns the 0x-prefixed public key for given SS58 address (or passes through a hex account)

    Parameters
    ----------
    address: SS58 address or 0x-prefixed hex account
    ss58_format: when set, the address must be encoded for this network

    Returns
    -------
    str
    """
    if address[0:2] == '0x':
        return bytes_to_hex(hex_to_bytes(address))

    return f'0x{ss58_decode(address, valid_ss58_format=ss58_format)}'
