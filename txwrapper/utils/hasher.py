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

""" Helper functions used to calculate digests of encoded calls and transactions
"""

from hashlib import blake2b
from typing import Union

from txwrapper.utils import hex_to_bytes


def blake2_256(data):
    """
    Helper function to calculate a 32 bytes Blake2b hash for provided data, used as identifier of calls and
    transactions and to compress signing payloads

    Parameters
    ----------
    data

    Returns
    -------

    """
    return blake2b(data, digest_size=32).digest()


def get_tx_hash(transaction: Union[bytes, str, 'SignedTransaction']) -> str:
    """
    Calculates the transaction hash of a signed transaction: the Blake2b-256 digest of the exact bytes that would be
    submitted to the chain

    Parameters
    ----------
    transaction: signed transaction as bytes, hex string or `SignedTransaction`

    Returns
    -------
    0x-prefixed hex digest
    """
    if hasattr(transaction, 'data'):
        transaction = transaction.data

    return f'0x{blake2_256(hex_to_bytes(transaction)).hex()}'
