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

import logging

from typing import Union, Callable

from scalecodec.base import ScaleBytes

from .constants import DEFAULT_SS58_FORMAT, DEFAULT_SIGNATURE_SCHEME, MIN_ERA_PERIOD, MAX_ERA_PERIOD
from .decoder import DecodedTransaction, decode_transaction
from .exceptions import ConfigurationError
from .scale.call import encode_call, decode_call
from .scale.codec import encode, decode_bytes
from .scale.era import Era, validate_era_bounds
from .scale.extrinsic import UnsignedTransaction, SignedTransaction, create_unsigned_transaction, \
    create_signing_payload, get_message_to_sign, apply_signature, get_signature_schemes
from .scale.metadata import Metadata, get_metadata
from .utils.hasher import get_tx_hash
from .utils.ss58 import derive_address, decode_address


__all__ = ['TxWrapper', 'logger']

logger = logging.getLogger(__name__)


class TxWrapper:

    def __init__(self, metadata: Union[str, bytes, Metadata], ss58_format: int = DEFAULT_SS58_FORMAT,
                 signature_scheme: str = DEFAULT_SIGNATURE_SCHEME, min_era_period: int = MIN_ERA_PERIOD,
                 max_era_period: int = MAX_ERA_PERIOD):
        """
        Offline transaction construction, signing payload generation and decoding for a Substrate runtime.
        Chain state (nonce, block hashes, runtime versions) and the signer are provided by the caller.

        Parameters
        ----------
        metadata: SCALE encoded runtime metadata (hex string or bytes, as returned by `state_getMetadata`) or a parsed Metadata
        ss58_format: The address type which account IDs will be SS58-encoded to Substrate addresses. Defaults to 42, for Kusama the address type is 2
        signature_scheme: Default signature scheme of signatures applied to transactions, e.g. Sr25519, Ed25519 or Ecdsa
        min_era_period: Smallest mortal era period bucket, a power of two
        max_era_period: Largest mortal era period bucket, a power of two
        """

        if ss58_format is not None and (type(ss58_format) is not int or not 0 <= ss58_format <= 16383):
            raise ConfigurationError(f"Invalid ss58_format {ss58_format!r}")

        validate_era_bounds(min_era_period, max_era_period)

        self.ss58_format = ss58_format
        self.min_era_period = min_era_period
        self.max_era_period = max_era_period

        if isinstance(metadata, Metadata):
            if metadata.ss58_format != ss58_format:
                raise ConfigurationError(
                    f"Metadata is parsed for ss58_format {metadata.ss58_format}, expected {ss58_format}"
                )
            self.metadata = metadata
        else:
            self.metadata = get_metadata(metadata, ss58_format=ss58_format)

        signature_schemes = get_signature_schemes(self.metadata)

        if signature_scheme not in signature_schemes:
            raise ConfigurationError(
                f"Signature scheme '{signature_scheme}' not supported, options: {', '.join(signature_schemes)}"
            )

        self.signature_scheme = signature_scheme

        logger.debug(
            f'TxWrapper initialized with metadata V{self.metadata.version}, ss58_format {ss58_format}, '
            f'signature scheme {signature_scheme}'
        )

    def compose_call(self, call_module: str, call_function: str, call_params: dict = None) -> bytes:
        """
        Composes a call payload which can be used in a transaction.

        Parameters
        ----------
        call_module: lowerCamel name of the runtime module e.g. balances
        call_function: Name of the call function e.g. transfer
        call_params: This is a dict containing the params of the call. e.g. `{'dest': 'EaG2CRhJWPb7qmdcJvy3LiWdh26Jreu9Dx6R1rXxPmYXoDk', 'value': 1000000000000}`

        Returns
        -------
        bytes
        """
        return encode_call(self.metadata, call_module, call_function, call_params)

    def decode_call(self, call_data: Union[bytes, str]) -> dict:
        return decode_call(self.metadata, call_data)

    def create_unsigned_transaction(self, call: Union[bytes, str, dict], address: str, nonce: int,
                                    spec_version: int, transaction_version: int, genesis_hash: str,
                                    block_hash: str, era, tip: int) -> UnsignedTransaction:
        """
        Creates an unsigned transaction for given call

        Parameters
        ----------
        call: Call bytes as returned by `compose_call()`, or a call dict
        address: SS58 address of the signer
        nonce: Current nonce of the signer account
        spec_version: Runtime spec version
        transaction_version: Runtime transaction version
        genesis_hash: Hash of block 0
        block_hash: Hash of the checkpoint block of a mortal era, `genesis_hash` for immortal transactions
        era: 'Immortal', or mortality in blocks in follow format: {'period': [amount_blocks], 'current': [block_number]}
        tip: The tip for the block author to gain priority during network congestion

        Returns
        -------
        UnsignedTransaction
        """
        return create_unsigned_transaction(
            self.metadata, call=call, address=address, nonce=nonce, spec_version=spec_version,
            transaction_version=transaction_version, genesis_hash=genesis_hash, block_hash=block_hash, era=era,
            tip=tip, min_era_period=self.min_era_period, max_era_period=self.max_era_period
        )

    def create_signing_payload(self, unsigned: UnsignedTransaction) -> bytes:
        """
        Returns the signing payload of given unsigned transaction. Use `get_message_to_sign()` to obtain the exact
        message a signer signs.
        """
        return create_signing_payload(unsigned)

    @staticmethod
    def get_message_to_sign(signing_payload: Union[bytes, str]) -> bytes:
        return get_message_to_sign(signing_payload)

    def create_signed_transaction(self, unsigned: UnsignedTransaction, signature: Union[bytes, str],
                                  address: str = None, signature_scheme: str = None) -> SignedTransaction:
        """
        Combines an unsigned transaction with an externally created signature

        Parameters
        ----------
        unsigned: UnsignedTransaction that was signed
        signature: Signature of the signing payload
        address: Signer address, defaults to the address of the unsigned transaction
        signature_scheme: Signature scheme of the signature, defaults to the configured scheme

        Returns
        -------
        SignedTransaction
        """
        return apply_signature(
            unsigned, signature, address=address, signature_scheme=signature_scheme or self.signature_scheme
        )

    def sign_with(self, unsigned: UnsignedTransaction, signer: Callable) -> SignedTransaction:
        """
        Signs given unsigned transaction with an external signer

        Parameters
        ----------
        unsigned: UnsignedTransaction to sign
        signer: callable receiving the message to sign (bytes) and returning the signature, or a tuple of signature and signer address

        Returns
        -------
        SignedTransaction
        """
        message = get_message_to_sign(create_signing_payload(unsigned))

        result = signer(message)

        if type(result) is tuple:
            signature, address = result
        else:
            signature, address = result, None

        return self.create_signed_transaction(unsigned, signature, address=address)

    def decode(self, data: Union[bytes, str, ScaleBytes, UnsignedTransaction, SignedTransaction]) -> DecodedTransaction:
        """
        Decodes a signing payload, unsigned transaction or signed transaction

        Parameters
        ----------
        data: bytes, hex string, or an UnsignedTransaction/SignedTransaction

        Returns
        -------
        DecodedTransaction
        """
        if isinstance(data, (UnsignedTransaction, SignedTransaction)):
            data = data.data

        return decode_transaction(self.metadata, data)

    @staticmethod
    def get_tx_hash(transaction: Union[bytes, str, SignedTransaction]) -> str:
        """
        Returns the transaction hash (Blake2-256) of given signed transaction as 0x-prefixed hex
        """
        return get_tx_hash(transaction)

    def derive_address(self, public_key: Union[str, bytes], ss58_format: int = None) -> str:
        """
        Derives the address of given public key, in the configured ss58_format unless specified
        """
        if ss58_format is None:
            ss58_format = self.ss58_format if self.ss58_format is not None else DEFAULT_SS58_FORMAT

        return derive_address(public_key, ss58_format=ss58_format)

    def decode_address(self, address: str) -> str:
        return decode_address(address, ss58_format=self.ss58_format)

    def create_era(self, value=None) -> Era:
        return Era.create(value, min_period=self.min_era_period, max_period=self.max_era_period)

    def resolve_type(self, type_string: Union[str, int]) -> str:
        """
        Returns the type string for given registry type id, type path or scalecodec type string
        """
        return self.metadata.resolve_type(type_string)

    def encode_scale(self, type_string: Union[str, int], value) -> bytes:
        """
        Helper function to encode arbitrary data into SCALE-bytes for given type

        Parameters
        ----------
        type_string: type id, primitive name or type path in the metadata, e.g. 'Compact<u32>' or 'sp_core::crypto::AccountId32'
        value: value to encode

        Returns
        -------
        bytes
        """
        return encode(self.resolve_type(type_string), value, metadata=self.metadata)

    def decode_scale(self, type_string: Union[str, int], scale_bytes: Union[bytes, str, ScaleBytes]):
        """
        Helper function to decode complete SCALE-bytes (e.g. 0x02000000) according to given type (e.g. u32 or
        sp_core::crypto::AccountId32). Remaining bytes after the value result in a DecodeError.

        Parameters
        ----------
        type_string: type id, primitive name or type path in the metadata
        scale_bytes: bytes or hex string

        Returns
        -------
        Decoded value
        """
        return decode_bytes(self.resolve_type(type_string), scale_bytes, metadata=self.metadata)
