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

import sys

from txwrapper import TxWrapper, methods
from txwrapper.exceptions import TxWrapperException

# import logging
# logging.basicConfig(level=logging.DEBUG)

# Metadata as returned by the `state_getMetadata` RPC call of the node, stored as hex
with open(sys.argv[1] if len(sys.argv) > 1 else 'metadata.hex') as metadata_file:
    tx_wrapper = TxWrapper(metadata=metadata_file.read().strip(), ss58_format=42)

# Chain state, retrieved by the caller from a node or indexer
info = {
    'address': '5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY',
    'nonce': 0,
    'spec_version': 9430,
    'transaction_version': 22,
    'genesis_hash': '0xe143f23803ac50e8f6f8e62695d1ce9e4e1d68aa36c1cd2cfd15340213f3423e',
    'block_hash': '0x1f6c4a3c6a1f0a4c5b0e0e2a0c0f0a8b3a7d9b4e6c2d1a0f9e8d7c6b5a493827',
    'block_number': 3358739,
    'era_period': 64
}

try:
    unsigned = methods.balances.transfer_keep_alive(tx_wrapper, {
        'dest': '5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty',
        'value': 1 * 10**15
    }, info)

    signing_payload = tx_wrapper.create_signing_payload(unsigned)

    print('Decoded signing payload: ', tx_wrapper.decode(signing_payload).value)
    print('Message to sign: ', f'0x{tx_wrapper.get_message_to_sign(signing_payload).hex()}')

    # Signature created by an external signer, e.g. `subkey sign`
    signature = input('Signature: ').strip()

    signed = tx_wrapper.create_signed_transaction(unsigned, signature)

    print('Signed transaction: ', signed.to_hex())
    print('Transaction hash: ', tx_wrapper.get_tx_hash(signed))

except TxWrapperException as e:
    print("Failed to create transaction: {}".format(e))
