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
from typing import Union

from scalecodec.base import ScaleBytes

from txwrapper.constants import BIT_SIGNED, UNMASK_VERSION, SUPPORTED_EXTRINSIC_VERSIONS
from txwrapper.exceptions import DecodeError, DecodeFormatError, UnknownCallError
from txwrapper.scale.codec import decode, to_scale_bytes
from txwrapper.scale.era import Era

__all__ = ['DecodedTransaction', 'decode_transaction', 'FORMAT_SIGNED', 'FORMAT_UNSIGNED', 'FORMAT_SIGNING_PAYLOAD']

logger = logging.getLogger(__name__)

FORMAT_SIGNED = 'signed'
FORMAT_UNSIGNED = 'unsigned'
FORMAT_SIGNING_PAYLOAD = 'signing_payload'


class DecodedTransaction:
    """
    Read-only structured view of a decoded signing payload, unsigned or signed transaction. Envelope fields that
    are not part of the decoded format are None.
    """

    def __init__(self, format: str, call: dict, version: int = None, address=None, signature: str = None,
                 signature_scheme: str = None, era: Era = None, nonce: int = None, tip: int = None,
                 spec_version: int = None, transaction_version: int = None, genesis_hash: str = None,
                 block_hash: str = None):
        self.format = format
        self.call = call
        self.version = version
        self.address = address
        self.signature = signature
        self.signature_scheme = signature_scheme
        self.era = era
        self.nonce = nonce
        self.tip = tip
        self.spec_version = spec_version
        self.transaction_version = transaction_version
        self.genesis_hash = genesis_hash
        self.block_hash = block_hash

    def __repr__(self):
        return f'<DecodedTransaction {self.format}: {self.module_name}.{self.call_name}>'

    @property
    def module_name(self) -> str:
        return self.call['call_module']

    @property
    def call_name(self) -> str:
        return self.call['call_function']

    @property
    def call_args(self) -> dict:
        return self.call['call_args']

    @property
    def call_index(self) -> str:
        return self.call['call_index']

    @property
    def value(self) -> dict:
        value = {'format': self.format}

        for name in ('version', 'address', 'signature', 'signature_scheme'):
            if getattr(self, name) is not None:
                value[name] = getattr(self, name)

        if self.era is not None:
            value['era'] = self.era.value

        for name in ('nonce', 'tip', 'spec_version', 'transaction_version', 'genesis_hash', 'block_hash'):
            if getattr(self, name) is not None:
                value[name] = getattr(self, name)

        value.update({
            'call_index': self.call_index,
            'module_name': self.module_name,
            'call_name': self.call_name,
            'call_args': self.call_args
        })
        return value
def _decode_version(data: ScaleBytes, signed: bool) -> int:
    version_info, _ = decode('u8', data)

    if bool(version_info & BIT_SIGNED) != signed:
        raise DecodeError(f"Version byte 0x{version_info:02x} {'lacks' if signed else 'has'} the signed bit")

    version = version_info & UNMASK_VERSION

    if version not in SUPPORTED_EXTRINSIC_VERSIONS:
        raise DecodeError(f'Extrinsic version {version} not supported')

    return version


def _account_from_address(address):
    # MultiAddress variants other than Id and Index decode as {'Address20': '0x..'}
    if type(address) is dict and len(address) == 1:
        return next(iter(address.values()))
    return address


def _decode_signed(metadata: 'Metadata', data: ScaleBytes) -> DecodedTransaction:
    length, _ = decode('Compact<u32>', data)

    if length != data.length - data.offset:
        raise DecodeError(f'Length prefix {length} does not match remaining {data.length - data.offset} bytes')

    version = _decode_version(data, signed=True)
    value, _ = decode('SignedExtrinsicV4', data, metadata=metadata)

    if type(value['signature']) is not dict or len(value['signature']) != 1:
        raise DecodeError(f"Unexpected signature value {value['signature']!r}")

    signature_scheme, signature = next(iter(value['signature'].items()))

    return DecodedTransaction(
        format=FORMAT_SIGNED, call=value['call'], version=version, address=_account_from_address(value['address']),
        signature=signature, signature_scheme=signature_scheme, era=Era.from_scale_value(value['era']),
        nonce=value['nonce'], tip=value['tip']
    )


def _decode_unsigned(metadata: 'Metadata', data: ScaleBytes) -> DecodedTransaction:
    version = _decode_version(data, signed=False)
    value, _ = decode('UnsignedExtrinsicV4', data, metadata=metadata)

    return DecodedTransaction(
        format=FORMAT_UNSIGNED, call=value['call'], version=version, address=_account_from_address(value['address']),
        era=Era.from_scale_value(value['era']), nonce=value['nonce'], tip=value['tip'],
        spec_version=value['spec_version'], transaction_version=value['transaction_version'],
        genesis_hash=value['genesis_hash'], block_hash=value['block_hash']
    )


def _decode_signing_payload(metadata: 'Metadata', data: ScaleBytes) -> DecodedTransaction:
    value, _ = decode('ExtrinsicPayloadValue', data, metadata=metadata)

    return DecodedTransaction(
        format=FORMAT_SIGNING_PAYLOAD, call=value['call'], era=Era.from_scale_value(value['era']),
        nonce=value['nonce'], tip=value['tip'], spec_version=value['spec_version'],
        transaction_version=value['transaction_version'], genesis_hash=value['genesis_hash'],
        block_hash=value['block_hash']
    )


# Tried in order, first candidate consuming all bytes wins
DECODE_CANDIDATES = (
    (FORMAT_SIGNED, _decode_signed),
    (FORMAT_UNSIGNED, _decode_unsigned),
    (FORMAT_SIGNING_PAYLOAD, _decode_signing_payload),
)


def decode_transaction(metadata: 'Metadata', data: Union[bytes, str, ScaleBytes]) -> DecodedTransaction:
    """
    Classifies given bytes as signed transaction, unsigned transaction or signing payload and decodes them.

    An unknown call index inside a signed or unsigned envelope is raised as `UnknownCallError` right away; for
    the signing payload candidate it only counts as a failed attempt.

    Parameters
    ----------
    metadata: Metadata used to resolve the call
    data: bytes, hex string or ScaleBytes

    Returns
    -------
    DecodedTransaction
    """
    raw = bytes(to_scale_bytes(data).data)

    attempts = []

    for format_name, decode_candidate in DECODE_CANDIDATES:
        candidate_data = ScaleBytes(bytearray(raw))
        try:
            decoded = decode_candidate(metadata, candidate_data)

            if candidate_data.offset != candidate_data.length:
                raise DecodeError(f'{candidate_data.length - candidate_data.offset} bytes remaining')

            return decoded

        except UnknownCallError as e:
            # Signed and unsigned candidates only reach the call after their envelope matched
            if format_name != FORMAT_SIGNING_PAYLOAD:
                raise
            attempts.append((format_name, str(e)))

        except DecodeError as e:
            attempts.append((format_name, str(e)))

        logger.debug(f'Not a {format_name} transaction: {attempts[-1][1]}')

    raise DecodeFormatError(
        'Bytes do not match any transaction format: ' +
        '; '.join([f'{format_name}: {reason}' for format_name, reason in attempts]),
        attempts=attempts
    )
