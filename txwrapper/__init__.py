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

from .base import TxWrapper, logger
from .constants import POLKADOT_SS58_FORMAT, KUSAMA_SS58_FORMAT, WESTEND_SS58_FORMAT, DEFAULT_SS58_FORMAT
from .decoder import DecodedTransaction, decode_transaction
from .exceptions import *
from .scale.era import Era
from .scale.extrinsic import UnsignedTransaction, SignedTransaction, create_unsigned_transaction, \
    create_signing_payload, get_message_to_sign, apply_signature
from .scale.metadata import Metadata, get_metadata
from .utils.hasher import get_tx_hash
from .utils.ss58 import derive_address, decode_address
from . import methods

__version__ = '1.0.0'
