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
from typing import Union

from txwrapper.constants import DEFAULT_EXTRINSIC_VERSION, SUPPORTED_EXTRINSIC_VERSIONS, BIT_SIGNED, \
    BIT_UNSIGNED, HASH_LENGTH, MAX_SIGNING_PAYLOAD_LENGTH, MIN_ERA_PERIOD, MAX_ERA_PERIOD, \
    DEFAULT_SIGNATURE_SCHEME, DEFAULT_SIGNATURE_SCHEMES
from txwrapper.exceptions import EncodeError, ConfigurationError, InvalidSignatureLengthError
from txwrapper.scale.call import get_call_hash
from txwrapper.scale.codec import encode, encode_compact
from txwrapper.scale.era import Era
from txwrapper.utils import hex_to_bytes, bytes_to_hex
from txwrapper.utils.hasher import blake2_256

__all__ = [
    'UnsignedTransaction', 'SignedTransaction', 'create_unsigned_transaction', 'create_signing_payload',
    'get_message_to_sign', 'apply_signature', 'get_signature_schemes'
]


def _hash_to_bytes(name: str, value: Union[str, bytes]) -> bytes:
    try:
        value = hex_to_bytes(value)
    except (ValueError, TypeError) as e:
        raise EncodeError(f"Invalid {name}: {e}") from e

    if len(value) != HASH_LENGTH:
        raise EncodeError(f"{name} must be {HASH_LENGTH} bytes, got {len(value)}")

    return value


def _normalize_address(metadata: 'Metadata', address):
    if type(address) in (bytes, bytearray):
        address = bytes_to_hex(address)

    try:
        encode('Address', address, metadata=metadata)
    except EncodeError as e:
        raise EncodeError(f"Invalid address: {e}") from e

    return address


class UnsignedTransaction:
    """
    Envelope of a call with everything needed to sign it. All fields are validated and encoded on creation;
    `data` holds the unsigned transaction bytes and `signing_payload` the bytes to be signed.
    """

    def __init__(self, metadata: 'Metadata', call: bytes, address, era: Era, nonce: int, tip: int,
                 spec_version: int, transaction_version: int, genesis_hash: bytes, block_hash: bytes,
                 version: int = DEFAULT_EXTRINSIC_VERSION):
        self.metadata = metadata
        self.call = call
        self.address = address
        self.era = era
        self.nonce = nonce
        self.tip = tip
        self.spec_version = spec_version
        self.transaction_version = transaction_version
        self.genesis_hash = genesis_hash
        self.block_hash = block_hash
        self.version = version

        self.data = bytes([version | BIT_UNSIGNED]) + encode('UnsignedExtrinsicV4', {
            'address': address,
            'era': era.scale_value,
            'nonce': nonce,
            'tip': tip,
            'spec_version': spec_version,
            'transaction_version': transaction_version,
            'genesis_hash': bytes_to_hex(genesis_hash),
            'block_hash': bytes_to_hex(block_hash),
            'call': bytes_to_hex(call)
        }, metadata=metadata)

        self.signing_payload = encode('ExtrinsicPayloadValue', {
            'call': bytes_to_hex(call),
            'era': era.scale_value,
            'nonce': nonce,
            'tip': tip,
            'spec_version': spec_version,
            'transaction_version': transaction_version,
            'genesis_hash': bytes_to_hex(genesis_hash),
            'block_hash': bytes_to_hex(block_hash)
        }, metadata=metadata)

    def __repr__(self):
        return f'<UnsignedTransaction: {self.to_hex()}>'

    @property
    def call_hash(self) -> str:
        return get_call_hash(self.call)

    def to_hex(self) -> str:
        return bytes_to_hex(self.data)

    @property
    def value(self) -> dict:
        return {
            'version': self.version,
            'address': self.address,
            'era': self.era.value,
            'nonce': self.nonce,
            'tip': self.tip,
            'spec_version': self.spec_version,
            'transaction_version': self.transaction_version,
            'genesis_hash': bytes_to_hex(self.genesis_hash),
            'block_hash': bytes_to_hex(self.block_hash),
            'call': bytes_to_hex(self.call)
        }


class SignedTransaction:
    """
    Final transaction bytes ready for submission: compact length prefix, version byte with the signed bit, signer
    address, signature scheme tag, signature, era, nonce, tip and call
    """

    def __init__(self, data: bytes, unsigned: UnsignedTransaction, address, signature: bytes,
                 signature_scheme: str):
        self.data = data
        self.unsigned = unsigned
        self.address = address
        self.signature = signature
        self.signature_scheme = signature_scheme

    def __repr__(self):
        return f'<SignedTransaction: {self.extrinsic_hash}>'

    @property
    def extrinsic_hash(self) -> str:
        return f'0x{blake2_256(self.data).hex()}'

    def to_hex(self) -> str:
        return bytes_to_hex(self.data)

    @property
    def value(self) -> dict:
        value = self.unsigned.value
        value.update({
            'address': self.address,
            'signature': bytes_to_hex(self.signature),
            'signature_scheme': self.signature_scheme,
            'extrinsic_hash': self.extrinsic_hash
        })
        return value


def create_unsigned_transaction(metadata: 'Metadata', call: Union[bytes, str, dict], address, nonce: int,
                                spec_version: int, transaction_version: int, genesis_hash: Union[str, bytes],
                                block_hash: Union[str, bytes], era, tip: int,
                                min_era_period: int = MIN_ERA_PERIOD,
                                max_era_period: int = MAX_ERA_PERIOD) -> UnsignedTransaction:
    """
    Builds an unsigned transaction. Every chain dependent value must be supplied by the caller, nothing is inferred.

    Parameters
    ----------
    metadata: Metadata of the runtime the transaction is built for
    call: encoded call (bytes or hex) or call dict, see `GenericRuntimeCall`
    address: signer address (SS58, hex account or MultiAddress value)
    nonce: account nonce
    spec_version: runtime spec version
    transaction_version: runtime transaction version
    genesis_hash: hash of block 0
    block_hash: hash of the checkpoint block of a mortal era, the genesis hash for an immortal era
    era: 'Immortal', Era, (period, phase), {'period': .., 'phase': ..} or {'period': .., 'current': ..}
    tip: tip for the block author
    min_era_period: lower bucket bound of mortal era periods
    max_era_period: upper bucket bound of mortal era periods

    Returns
    -------
    UnsignedTransaction
    """

    # Check if extrinsic version is supported
    if metadata.extrinsic_version not in SUPPORTED_EXTRINSIC_VERSIONS:
        raise ConfigurationError(f"Extrinsic version {metadata.extrinsic_version} not supported")

    if type(call) is str:
        try:
            call = hex_to_bytes(call)
        except ValueError as e:
            raise EncodeError(f'Invalid encoded call: {e}') from e

    call_data = encode('Call', call, metadata=metadata)

    era = Era.create(era, min_period=min_era_period, max_period=max_era_period)

    for name, value in (('nonce', nonce), ('tip', tip)):
        if type(value) is not int or value < 0:
            raise EncodeError(f"{name} must be a non-negative int, got {value!r}")

    for name, value in (('spec_version', spec_version), ('transaction_version', transaction_version)):
        if type(value) is not int or not 0 <= value < 2**32:
            raise EncodeError(f"{name} must be an unsigned 32-bit int, got {value!r}")

    genesis_hash = _hash_to_bytes('genesis_hash', genesis_hash)
    block_hash = _hash_to_bytes('block_hash', block_hash)

    if era.is_immortal() and block_hash != genesis_hash:
        raise EncodeError('Block hash must be equal to genesis hash for an immortal era')

    return UnsignedTransaction(
        metadata=metadata, call=call_data, address=_normalize_address(metadata, address), era=era, nonce=nonce,
        tip=tip, spec_version=spec_version, transaction_version=transaction_version, genesis_hash=genesis_hash,
        block_hash=block_hash, version=metadata.extrinsic_version
    )


def create_signing_payload(unsigned: UnsignedTransaction) -> bytes:
    """
    Returns the bytes an external signer must sign: call, era, nonce, tip, spec version, transaction version,
    genesis hash and checkpoint block hash. The signer address is not part of the payload.
    """
    return unsigned.signing_payload


def get_message_to_sign(signing_payload: Union[bytes, str]) -> bytes:
    """
    Returns the message that is actually signed: payloads longer than 256 bytes are replaced by their Blake2-256
    digest
    """
    signing_payload = hex_to_bytes(signing_payload)

    if len(signing_payload) > MAX_SIGNING_PAYLOAD_LENGTH:
        return blake2_256(signing_payload)

    return signing_payload


def get_signature_schemes(metadata: 'Metadata') -> dict:
    return metadata.get_signature_schemes() or DEFAULT_SIGNATURE_SCHEMES


def apply_signature(unsigned: UnsignedTransaction, signature: Union[bytes, str], address=None,
                    signature_scheme: str = DEFAULT_SIGNATURE_SCHEME) -> SignedTransaction:
    """
    Creates the signed transaction for given unsigned transaction and externally produced signature

    Parameters
    ----------
    unsigned: UnsignedTransaction that was signed
    signature: signature bytes (or hex), optionally prefixed with the scheme tag
    address: signer address, defaults to the address of the unsigned transaction
    signature_scheme: name of the signature scheme, e.g. 'Sr25519', 'Ed25519' or 'Ecdsa'

    Returns
    -------
    SignedTransaction
    """
    signature_schemes = get_signature_schemes(unsigned.metadata)

    if signature_scheme not in signature_schemes:
        raise ConfigurationError(
            f"Signature scheme '{signature_scheme}' not supported, options: {', '.join(signature_schemes)}"
        )

    scheme_tag, signature_length = signature_schemes[signature_scheme]

    try:
        signature = hex_to_bytes(signature)
    except (ValueError, TypeError) as e:
        raise EncodeError(f'Invalid signature: {e}') from e

    # MultiSignature encoded signature, which contains the scheme tag
    if len(signature) == signature_length + 1 and signature[0] == scheme_tag:
        signature = signature[1:]

    if len(signature) != signature_length:
        raise InvalidSignatureLengthError(
            f'{signature_scheme} signature must be {signature_length} bytes, got {len(signature)}',
            expected=signature_length, actual=len(signature)
        )

    if address is None:
        address = unsigned.address
    else:
        address = _normalize_address(unsigned.metadata, address)

    payload = bytes([unsigned.version | BIT_SIGNED]) + encode('SignedExtrinsicV4', {
        'address': address,
        'signature': {signature_scheme: bytes_to_hex(signature)},
        'era': unsigned.era.scale_value,
        'nonce': unsigned.nonce,
        'tip': unsigned.tip,
        'call': bytes_to_hex(unsigned.call)
    }, metadata=unsigned.metadata)

    return SignedTransaction(
        data=encode_compact(len(payload)) + payload,
        unsigned=unsigned,
        address=address,
        signature=signature,
        signature_scheme=signature_scheme
    )
