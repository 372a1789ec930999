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


def batch(wrapper: 'TxWrapper', args: dict, info: dict) -> UnsignedTransaction:
    """
    Dispatch a batch of calls. Each element of `args['calls']` is an encoded call (bytes or hex, e.g. the result of
    `TxWrapper.compose_call()`), a call dict {'call_module': .., 'call_function': .., 'call_args': ..} or
    {'balances': {'transfer': {..}}}.

    Parameters
    ----------
    wrapper: TxWrapper
    args: {'calls': list of calls}
    info: chain state of the transaction

    Returns
    -------
    UnsignedTransaction
    """
    return create_method(wrapper, 'utility', 'batch', args, info)
