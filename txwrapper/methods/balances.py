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
from txwrapper.scale.extrinsic import UnsignedTransaction

from .base import create_method


def transfer(wrapper: 'TxWrapper', args: dict, info: dict) -> UnsignedTransaction:
    """
    Transfer `value` to `dest`, the recipient account may be reaped if the sender balance drops below the existential
    deposit.

    Parameters
    ----------
    wrapper: TxWrapper
    args: {'dest': address of the recipient, 'value': amount in the smallest unit}
    info: chain state of the transaction

    Returns
    -------
    UnsignedTransaction
    """
    return create_method(wrapper, 'balances', 'transfer', args, info)


def transfer_keep_alive(wrapper: 'TxWrapper', args: dict, info: dict) -> UnsignedTransaction:
    """
    Same as `transfer`, but fails when the sender account would be killed by the transfer
    """
    return create_method(wrapper, 'balances', 'transfer_keep_alive', args, info)


def transfer_all(wrapper: 'TxWrapper', args: dict, info: dict) -> UnsignedTransaction:
    """
    Transfer the entire transferable balance to `dest`; args: {'dest': .., 'keep_alive': bool}
    """
    return create_method(wrapper, 'balances', 'transfer_all', args, info)
