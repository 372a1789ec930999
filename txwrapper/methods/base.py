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
Convenience wrappers creating unsigned transactions for commonly used calls. Every wrapper takes the `TxWrapper`,
the call arguments and an info dict with the chain state of the transaction:

    address, nonce, spec_version, transaction_version, genesis_hash (required)
    tip (default 0)
    era, or block_number and block_hash with an optional era_period (default 64); immortal when none is given
"""
from typing import Optional

from txwrapper.constants import DEFAULT_ERA_PERIOD
from txwrapper.exceptions import MissingArgumentError
from txwrapper.scale.extrinsic import UnsignedTransaction

REQUIRED_INFO = ('address', 'nonce', 'spec_version', 'transaction_version', 'genesis_hash')


def get_era_from_info(info: dict) -> tuple:
    """
    Returns the era and checkpoint block hash described by given info dict
    """
    if info.get('era') is not None:
        if info.get('block_hash') is None:
            raise MissingArgumentError("Info 'block_hash' required with an explicit era", argument_name='block_hash')
        return info['era'], info['block_hash']

    if info.get('block_number') is None:
        return 'Immortal', info['genesis_hash']

    era_period = info.get('era_period', DEFAULT_ERA_PERIOD)

    if era_period in (0, 1):
        # Immortal transactions are checked against the genesis hash
        return 'Immortal', info['genesis_hash']

    if info.get('block_hash') is None:
        raise MissingArgumentError("Info 'block_hash' required for a mortal era", argument_name='block_hash')

    return {'period': era_period, 'current': info['block_number']}, info['block_hash']


def create_method(wrapper: 'TxWrapper', call_module: str, call_function: str, call_params: Optional[dict],
                  info: dict) -> UnsignedTransaction:
    """
    Composes given call and wraps it in an unsigned transaction

    Parameters
    ----------
    wrapper: TxWrapper holding the metadata
    call_module: lowerCamel name of the runtime module e.g. balances
    call_function: Name of the call function e.g. transfer
    call_params: dict with the params of the call
    info: dict with the chain state of the transaction (see module documentation)

    Returns
    -------
    UnsignedTransaction
    """
    for name in REQUIRED_INFO:
        if info.get(name) is None:
            raise MissingArgumentError(f"Info '{name}' not specified", argument_name=name)

    era, block_hash = get_era_from_info(info)

    return wrapper.create_unsigned_transaction(
        call=wrapper.compose_call(call_module, call_function, call_params),
        address=info['address'],
        nonce=info['nonce'],
        spec_version=info['spec_version'],
        transaction_version=info['transaction_version'],
        genesis_hash=info['genesis_hash'],
        block_hash=block_hash,
        era=era,
        tip=info.get('tip', 0)
    )
