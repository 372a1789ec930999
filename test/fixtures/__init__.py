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
Runtime metadata blobs used by the tests, created by encoding metadata values with the library's own metadata
schema. The runtime resembles a small Substrate node: System, Timestamp, Balances (with an Ethereum style
`transfer`), Democracy and Utility.
"""
from txwrapper.scale.codec import encode

ALICE_PUBLIC_KEY = '0xd43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d'
ALICE_ADDRESS = '5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY'
ALICE_POLKADOT_ADDRESS = '15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5'
BOB_PUBLIC_KEY = '0x8eaf04151687736326c9fea17e25fc5287613693c912909cb226aa4794f26a48'
BOB_ADDRESS = '5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty'
ETHEREUM_ACCOUNT = '0x6be02d1d3665660d22ff9624b7be0551ee1ac91b'

GENESIS_HASH = '0xe143f23803ac50e8f6f8e62695d1ce9e4e1d68aa36c1cd2cfd15340213f3423e'
BLOCK_HASH = '0x1f6c4a3c6a1f0a4c5b0e0e2a0c0f0a8b3a7d9b4e6c2d1a0f9e8d7c6b5a493827'
SPEC_VERSION = 9430
TRANSACTION_VERSION = 22


def registry_type(type_id, type_def, path=(), params=(), docs=()):
    return {
        'id': type_id,
        'type': {
            'path': list(path),
            'params': [{'name': name, 'type': param_type} for name, param_type in params],
            'def': type_def,
            'docs': list(docs)
        }
    }


def field(type_id, name=None, type_name=None):
    return {'name': name, 'type': type_id, 'typeName': type_name, 'docs': []}


def variant(name, index, fields=()):
    return {'name': name, 'fields': list(fields), 'index': index, 'docs': []}


def primitive(name):
    return {'primitive': name}


def composite(*fields):
    return {'composite': {'fields': list(fields)}}


def variants(*items):
    return {'variant': {'variants': list(items)}}


def array(length, type_id):
    return {'array': {'len': length, 'type': type_id}}


def sequence(type_id):
    return {'sequence': {'type': type_id}}


def compact(type_id):
    return {'compact': {'type': type_id}}


def tuple_of(*type_ids):
    return {'tuple': list(type_ids)}


def create_portable_types() -> list:
    return [
        registry_type(0, primitive('u8')),
        registry_type(1, array(32, 0)),
        registry_type(2, composite(field(1, type_name='[u8; 32]')), path=['sp_core', 'crypto', 'AccountId32']),
        registry_type(3, primitive('u128')),
        registry_type(4, compact(3)),
        registry_type(5, array(20, 0)),
        registry_type(6, composite(field(5, type_name='[u8; 20]')), path=['account', 'AccountId20']),
        registry_type(7, primitive('u32')),
        registry_type(8, compact(7)),
        registry_type(9, tuple_of()),
        registry_type(
            10,
            variants(
                variant('Id', 0, [field(2, type_name='AccountId')]),
                variant('Index', 1, [field(8, type_name='AccountIndex')]),
                variant('Raw', 2, [field(11, type_name='Vec<u8>')]),
                variant('Address32', 3, [field(1, type_name='[u8; 32]')]),
                variant('Address20', 4, [field(5, type_name='[u8; 20]')]),
            ),
            path=['sp_runtime', 'multiaddress', 'MultiAddress'], params=[('AccountId', 2), ('AccountIndex', 9)]
        ),
        registry_type(11, sequence(0)),
        registry_type(12, primitive('bool')),
        registry_type(
            13,
            variants(
                variant('transfer', 0, [
                    field(6, 'dest', 'AccountIdLookupOf<T>'), field(4, 'value', 'T::Balance')
                ]),
                variant('transfer_keep_alive', 3, [
                    field(10, 'dest', 'AccountIdLookupOf<T>'), field(4, 'value', 'T::Balance')
                ]),
                variant('transfer_all', 4, [
                    field(10, 'dest', 'AccountIdLookupOf<T>'), field(12, 'keep_alive', 'bool')
                ]),
            ),
            path=['pallet_balances', 'pallet', 'Call']
        ),
        registry_type(
            14,
            variants(
                variant('Standard', 0, [field(15, 'vote', 'Vote'), field(3, 'balance', 'Balance')]),
                variant('Split', 1, [field(3, 'aye', 'Balance'), field(3, 'nay', 'Balance')]),
            ),
            path=['pallet_democracy', 'vote', 'AccountVote']
        ),
        registry_type(15, composite(field(0)), path=['pallet_democracy', 'vote', 'Vote']),
        registry_type(
            16,
            variants(
                variant('vote', 0, [field(8, 'ref_index', 'ReferendumIndex'), field(14, 'vote', 'AccountVote')])
            ),
            path=['pallet_democracy', 'pallet', 'Call']
        ),
        registry_type(17, sequence(19)),
        registry_type(
            18,
            variants(variant('batch', 0, [field(17, 'calls', 'Vec<<T as Config>::RuntimeCall>')])),
            path=['pallet_utility', 'pallet', 'Call']
        ),
        registry_type(
            19,
            variants(
                variant('System', 0, [field(20)]),
                variant('Balances', 5, [field(13)]),
                variant('Democracy', 14, [field(16)]),
                variant('Utility', 26, [field(18)]),
            ),
            path=['node_runtime', 'RuntimeCall']
        ),
        registry_type(
            20,
            variants(
                variant('remark', 0, [field(11, 'remark', 'Vec<u8>')]),
                variant('set_heap_pages', 1, [field(21, 'pages', 'u64')]),
            ),
            path=['frame_system', 'pallet', 'Call']
        ),
        registry_type(21, primitive('u64')),
        registry_type(
            22,
            variants(variant('Immortal', 0), variant('Mortal1', 1, [field(0)])),
            path=['sp_runtime', 'generic', 'era', 'Era']
        ),
        registry_type(23, array(64, 0)),
        registry_type(24, array(65, 0)),
        registry_type(25, composite(field(23, type_name='[u8; 64]')), path=['sp_core', 'ed25519', 'Signature']),
        registry_type(26, composite(field(23, type_name='[u8; 64]')), path=['sp_core', 'sr25519', 'Signature']),
        registry_type(27, composite(field(24, type_name='[u8; 65]')), path=['sp_core', 'ecdsa', 'Signature']),
        registry_type(
            28,
            variants(
                variant('Ed25519', 0, [field(25)]),
                variant('Sr25519', 1, [field(26)]),
                variant('Ecdsa', 2, [field(27)]),
            ),
            path=['sp_runtime', 'MultiSignature']
        ),
        registry_type(
            29,
            composite(field(11)),
            path=['sp_runtime', 'generic', 'unchecked_extrinsic', 'UncheckedExtrinsic'],
            params=[('Address', 10), ('Call', 19), ('Signature', 28), ('Extra', 30)]
        ),
        registry_type(30, tuple_of(31, 32, 33)),
        registry_type(
            31, composite(field(8, type_name='T::Nonce')), path=['frame_system', 'extensions', 'check_nonce', 'CheckNonce']
        ),
        registry_type(
            32, composite(field(22, type_name='Era')),
            path=['frame_system', 'extensions', 'check_mortality', 'CheckMortality']
        ),
        registry_type(
            33, composite(field(4, type_name='BalanceOf<T>')),
            path=['pallet_transaction_payment', 'ChargeTransactionPayment']
        ),
        registry_type(34, variants(variant('None', 0), variant('Some', 1, [field(7)])), path=['Option'],
                      params=[('T', 7)]),
        registry_type(35, composite(field(1, type_name='[u8; 32]')), path=['primitive_types', 'H256']),
        registry_type(36, composite(), path=['node_runtime', 'Runtime']),
        registry_type(
            37,
            variants(
                variant('Transfer', 2, [field(2, 'from', 'T::AccountId'), field(2, 'to', 'T::AccountId'),
                                        field(3, 'amount', 'T::Balance')]),
            ),
            path=['pallet_balances', 'pallet', 'Event']
        ),
        registry_type(
            38,
            variants(variant('VestingBalance', 0), variant('InsufficientBalance', 2)),
            path=['pallet_balances', 'pallet', 'Error']
        ),
        registry_type(39, {'bitsequence': {'bit_store_type': 0, 'bit_order_type': 40}}),
        registry_type(40, composite(), path=['bitvec', 'order', 'Lsb0']),
        registry_type(
            41,
            composite(field(12, 'enabled', 'bool'), field(34, 'limit', 'Option<u32>'), field(39, 'bits', 'BitVec')),
            path=['node_runtime', 'Flags']
        ),
        registry_type(42, tuple_of(7, 12)),
    ]


def create_pallets(version: int) -> list:
    pallets = [
        {
            'name': 'System',
            'storage': {
                'prefix': 'System',
                'entries': [
                    {
                        'name': 'Account',
                        'modifier': 'Default',
                        'type': {'Map': {'hashers': ['Blake2_128Concat'], 'key': 2, 'value': 3}},
                        'default': bytes(16),
                        'documentation': [' The full account information for a particular account ID.']
                    },
                    {
                        'name': 'Number',
                        'modifier': 'Default',
                        'type': {'Plain': 7},
                        'default': bytes(4),
                        'documentation': [' The current block number being processed.']
                    }
                ]
            },
            'calls': {'ty': 20},
            'event': None,
            'constants': [
                {'name': 'BlockHashCount', 'type': 7, 'value': '0x60090000', 'documentation': []}
            ],
            'error': None,
            'index': 0
        },
        {
            'name': 'Timestamp',
            'storage': None,
            'calls': None,
            'event': None,
            'constants': [],
            'error': None,
            'index': 3
        },
        {
            'name': 'Balances',
            'storage': None,
            'calls': {'ty': 13},
            'event': {'ty': 37},
            'constants': [
                {'name': 'ExistentialDeposit', 'type': 3, 'value': (10 ** 10).to_bytes(16, 'little'),
                 'documentation': [' The minimum amount required to keep an account open.']}
            ],
            'error': {'ty': 38},
            'index': 5
        },
        {
            'name': 'Democracy',
            'storage': None,
            'calls': {'ty': 16},
            'event': None,
            'constants': [],
            'error': None,
            'index': 14
        },
        {
            'name': 'Utility',
            'storage': None,
            'calls': {'ty': 18},
            'event': None,
            'constants': [],
            'error': None,
            'index': 26
        },
    ]

    if version >= 15:
        for pallet in pallets:
            pallet['docs'] = []

    return pallets


SIGNED_EXTENSIONS = [
    {'identifier': 'CheckNonce', 'ty': 31, 'additional_signed': 9},
    {'identifier': 'CheckMortality', 'ty': 32, 'additional_signed': 35},
    {'identifier': 'ChargeTransactionPayment', 'ty': 33, 'additional_signed': 9},
]


def create_metadata_value(version: int = 14) -> dict:
    value = {
        'types': {'types': create_portable_types()},
        'pallets': create_pallets(version),
        'runtime_type': 36
    }

    if version >= 15:
        value['extrinsic'] = {
            'version': 4,
            'address_type': 10,
            'call_type': 19,
            'signature_type': 28,
            'extra_type': 30,
            'signed_extensions': SIGNED_EXTENSIONS
        }
        value['apis'] = [
            {
                'name': 'AccountNonceApi',
                'methods': [
                    {'name': 'account_nonce', 'inputs': [{'name': 'account', 'type': 2}], 'output': 7, 'docs': []}
                ],
                'docs': [' The API to query account nonce.']
            }
        ]
        value['outer_enums'] = {'call_type': 19, 'event_type': 37, 'error_type': 38}
        value['custom'] = {'map': []}
    else:
        value['extrinsic'] = {'ty': 29, 'version': 4, 'signed_extensions': SIGNED_EXTENSIONS}

    return value


def encode_metadata(value: dict, version: int = 14) -> str:
    return f"0x{encode('MetadataVersioned', ('0x6d657461', {f'V{version}': value})).hex()}"


METADATA_V14_HEX = encode_metadata(create_metadata_value(14), 14)
METADATA_V15_HEX = encode_metadata(create_metadata_value(15), 15)
