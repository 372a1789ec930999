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

DEFAULT_EXTRINSIC_VERSION = 4
SUPPORTED_EXTRINSIC_VERSIONS = (4,)

BIT_SIGNED = 0b10000000
BIT_UNSIGNED = 0
UNMASK_VERSION = 0b01111111

METADATA_MAGIC = b'meta'
SUPPORTED_METADATA_VERSIONS = (14, 15)

HASH_LENGTH = 32

# Payloads longer than this are hashed with blake2-256 before signing
MAX_SIGNING_PAYLOAD_LENGTH = 256

# Mortal era buckets
MIN_ERA_PERIOD = 4
MAX_ERA_PERIOD = 1 << 16
ERA_PHASE_QUANTIZE_SHIFT = 12

DEFAULT_SIGNATURE_SCHEME = 'Sr25519'
DEFAULT_SIGNATURE_SCHEMES = {
    'Ed25519': (0, 64),
    'Sr25519': (1, 64),
    'Ecdsa': (2, 65),
}

POLKADOT_SS58_FORMAT = 0
KUSAMA_SS58_FORMAT = 2
WESTEND_SS58_FORMAT = 42
DEFAULT_SS58_FORMAT = WESTEND_SS58_FORMAT

# Mortal era period used by the call wrappers when only a block number is given
DEFAULT_ERA_PERIOD = 64

# Sequences may announce more elements than there are remaining bytes only up to this count (zero-sized elements)
MAX_ZERO_SIZED_ELEMENTS = 1024

# Runtime call types of V14/V15 metadata
RUNTIME_CALL_PATHS = ('*::RuntimeCall', '*::Call', '*::runtime::Call')
