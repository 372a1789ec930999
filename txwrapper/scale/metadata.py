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
from functools import lru_cache
from typing import Optional, NamedTuple, Union

from scalecodec.base import ScaleBytes

from txwrapper.constants import METADATA_MAGIC, SUPPORTED_METADATA_VERSIONS, DEFAULT_SS58_FORMAT
from txwrapper.exceptions import TxWrapperException, MetadataParseError, UnknownCallError, UnknownTypeError, \
    DecodeError
from txwrapper.scale.codec import to_scale_bytes
from txwrapper.scale.types import SCALE_ERRORS, TxWrapperRuntimeConfiguration
from txwrapper.utils import lower_camel_case

__all__ = ['Metadata', 'ModuleMetadata', 'CallDescriptor', 'CallArgument', 'get_metadata']

logger = logging.getLogger(__name__)

METADATA_CACHE_SIZE = 8


class CallArgument(NamedTuple):
    name: str
    type_id: int
    type_name: Optional[str]
    type_string: str


class CallDescriptor(NamedTuple):
    module_name: str
    module_index: int
    call_name: str
    call_index: int
    args: tuple
    docs: tuple = ()
    pallet_name: Optional[str] = None

    @property
    def arg_names(self) -> list:
        return [arg.name for arg in self.args]


class ModuleMetadata:

    def __init__(self, name: str, index: int, calls: tuple, events: tuple = (), errors: tuple = (),
                 constants: tuple = (), storage: tuple = (), docs: tuple = (), pallet_name: str = None):
        self.name = name
        self.pallet_name = pallet_name or name
        self.index = index
        self.calls = calls
        self.events = events
        self.errors = errors
        self.constants = constants
        self.storage = storage
        self.docs = docs

    def __repr__(self):
        return f'<ModuleMetadata {self.index}: {self.name}>'

    def get_call(self, name: str) -> Optional[CallDescriptor]:
        for call in self.calls:
            if call.call_name == name:
                return call


def _referenced_type_ids(registry_type: dict) -> list:
    type_def = registry_type['def']
    type_ids = [param['type'] for param in registry_type['params'] if param['type'] is not None]

    if 'composite' in type_def:
        type_ids += [f['type'] for f in type_def['composite']['fields']]
    elif 'variant' in type_def:
        type_ids += [f['type'] for v in type_def['variant']['variants'] for f in v['fields']]
    elif 'sequence' in type_def:
        type_ids.append(type_def['sequence']['type'])
    elif 'array' in type_def:
        type_ids.append(type_def['array']['type'])
    elif 'tuple' in type_def:
        type_ids += type_def['tuple']
    elif 'compact' in type_def:
        type_ids.append(type_def['compact']['type'])
    elif 'bitsequence' in type_def:
        type_ids += [type_def['bitsequence']['bit_store_type'], type_def['bitsequence']['bit_order_type']]

    return type_ids


class Metadata:
    """
    Parsed runtime metadata: the ordered list of modules with their call definitions and the scalecodec runtime
    configuration holding the portable type registry, used to encode and decode call arguments.

    Modules are named in lowerCamel case ('balances', 'democracy'), calls keep their metadata name
    ('transfer_keep_alive'). Both are matched exactly.
    """

    def __init__(self, version: int, metadata_obj, ss58_format: Optional[int] = DEFAULT_SS58_FORMAT):
        self.__version = version
        self.__ss58_format = ss58_format

        value = metadata_obj.value[1][f'V{version}']
        extrinsic = value['extrinsic']

        self.__registry_types = {portable_type['id']: portable_type['type'] for portable_type in value['types']['types']}

        for si_type_id, registry_type in self.__registry_types.items():
            for type_id in _referenced_type_ids(registry_type):
                if type_id not in self.__registry_types:
                    raise MetadataParseError(
                        f'Type #{type_id} is referenced by #{si_type_id} but not defined in the portable registry'
                    )

        if version >= 15:
            extrinsic_params = {
                'Address': extrinsic['address_type'],
                'Call': extrinsic['call_type'],
                'Signature': extrinsic['signature_type'],
                'Extra': extrinsic['extra_type'],
            }
            self.__apis = tuple([api['name'] for api in value['apis']])
        else:
            extrinsic_params = {
                param['name']: param['type'] for param in self.get_registry_type(extrinsic['ty'])['params']
                if param['type'] is not None
            }
            self.__apis = ()

        self.__extrinsic_version = extrinsic['version']
        self.__signed_extensions = tuple([se['identifier'] for se in extrinsic['signed_extensions']])
        self.__extrinsic_params = extrinsic_params

        self.__runtime_config = TxWrapperRuntimeConfiguration(ss58_format=ss58_format, metadata=self)

        try:
            self.__runtime_config.update_from_scale_info_types(
                metadata_obj.portable_registry.value_object['types'].value_object
            )
        except (NotImplementedError, ValueError) as e:
            raise MetadataParseError(f'Unsupported type definition in portable registry: {e}') from e

        self.__register_extrinsic_types()

        modules = []
        self.__calls_by_name = {}
        self.__calls_by_index = {}

        for pallet in value['pallets']:
            module_name = lower_camel_case(pallet['name'])
            calls = self.__create_call_descriptors(pallet, module_name)
            module = ModuleMetadata(
                name=module_name,
                pallet_name=pallet['name'],
                index=pallet['index'],
                calls=calls,
                events=self.__variant_names(pallet['event']),
                errors=self.__variant_names(pallet['error']),
                constants=tuple([constant['name'] for constant in pallet['constants']]),
                storage=tuple([entry['name'] for entry in pallet['storage']['entries']]) if pallet['storage'] else (),
                docs=tuple(pallet.get('docs', []))
            )
            modules.append(module)

            for call in calls:
                self.__calls_by_name[(call.module_name, call.call_name)] = call
                self.__calls_by_index[(call.module_index, call.call_index)] = call

        self.__modules = tuple(modules)

        self.__path_lookup = {}
        ambiguous = set()
        for si_type_id, registry_type in self.__registry_types.items():
            if not registry_type['path']:
                continue
            self.__path_lookup['::'.join(registry_type['path'])] = si_type_id
            name = registry_type['path'][-1]
            if name in ambiguous:
                continue
            if name in self.__path_lookup and self.__path_lookup[name] != si_type_id:
                ambiguous.add(name)
                del self.__path_lookup[name]
            else:
                self.__path_lookup[name] = si_type_id

        logger.debug(
            f'Parsed metadata V{version}: {len(self.__modules)} modules, {len(self.__calls_by_name)} calls, '
            f'{len(self.__registry_types)} types'
        )

    @classmethod
    def parse(cls, data: Union[str, bytes, bytearray, ScaleBytes],
              ss58_format: Optional[int] = DEFAULT_SS58_FORMAT) -> 'Metadata':
        """
        Parses a SCALE encoded metadata blob (as returned by `state_getMetadata`)

        Parameters
        ----------
        data: hex string, bytes or ScaleBytes starting with the 'meta' magic and the version byte
        ss58_format: network prefix used to render decoded 32 byte accounts

        Returns
        -------
        Metadata
        """
        try:
            data = to_scale_bytes(data)
        except (DecodeError, TypeError) as e:
            raise MetadataParseError(f'Invalid metadata input: {e}') from e

        header = bytes(data.data[data.offset:data.offset + 5])

        if len(header) < 5:
            raise MetadataParseError('Metadata too short to contain magic and version')

        if header[0:4] != METADATA_MAGIC:
            raise MetadataParseError(f'Invalid metadata magic 0x{header[0:4].hex()}')

        version = header[4]

        if version not in SUPPORTED_METADATA_VERSIONS:
            raise MetadataParseError(f'Metadata version V{version} not supported')

        runtime_config = TxWrapperRuntimeConfiguration(ss58_format=ss58_format)
        metadata_obj = runtime_config.create_scale_object('MetadataVersioned', data=data)

        try:
            metadata_obj.decode()
        except (TxWrapperException, *SCALE_ERRORS) as e:
            raise MetadataParseError(f'Failed to decode metadata V{version}: {e}') from e

        try:
            return cls(version, metadata_obj, ss58_format=ss58_format)
        except (UnknownTypeError, UnknownCallError) as e:
            raise MetadataParseError(f'Inconsistent metadata V{version}: {e}') from e

    def __register_extrinsic_types(self):
        types = {}

        address_type_id = self.__extrinsic_params.get('Address')
        if address_type_id is not None:
            types['Address'] = types['LookupSource'] = types['AccountId'] = f'scale_info::{address_type_id}'

            address_type = self.get_registry_type(address_type_id)
            if address_type['path'] == ['sp_runtime', 'multiaddress', 'MultiAddress']:
                for param in address_type['params']:
                    if param['name'] == 'AccountId' and param['type'] is not None:
                        types['AccountId'] = f"scale_info::{param['type']}"

        call_type_id = self.__extrinsic_params.get('Call')
        if call_type_id is not None:
            types[f'scale_info::{call_type_id}'] = 'GenericRuntimeCall'

        if self.get_signature_schemes():
            types['ExtrinsicSignature'] = f"scale_info::{self.__extrinsic_params['Signature']}"

        self.__runtime_config.update_type_registry_types(types)

    def __create_call_descriptors(self, pallet: dict, module_name: str) -> tuple:
        if not pallet['calls']:
            return ()

        call_type = self.get_registry_type(pallet['calls']['ty'])

        if 'variant' not in call_type['def']:
            raise MetadataParseError(f"Calls of module '{pallet['name']}' are not defined as a variant type")

        calls = []
        for variant in call_type['def']['variant']['variants']:
            args = tuple([
                CallArgument(
                    name=field['name'] or f'arg{position}',
                    type_id=field['type'],
                    type_name=field['typeName'],
                    type_string=f"scale_info::{field['type']}"
                )
                for position, field in enumerate(variant['fields'])
            ])
            calls.append(CallDescriptor(
                module_name=module_name,
                module_index=pallet['index'],
                call_name=variant['name'],
                call_index=variant['index'],
                args=args,
                docs=tuple(variant['docs']),
                pallet_name=pallet['name']
            ))

        return tuple(sorted(calls, key=lambda c: c.call_index))

    def __variant_names(self, pallet_item: Optional[dict]) -> tuple:
        if not pallet_item:
            return ()
        registry_type = self.get_registry_type(pallet_item['ty'])
        if 'variant' not in registry_type['def']:
            return ()
        return tuple([variant['name'] for variant in registry_type['def']['variant']['variants']])

    @property
    def version(self) -> int:
        return self.__version

    @property
    def ss58_format(self) -> Optional[int]:
        return self.__ss58_format

    @property
    def modules(self) -> tuple:
        return self.__modules

    @property
    def runtime_config(self) -> TxWrapperRuntimeConfiguration:
        return self.__runtime_config

    @property
    def extrinsic_version(self) -> int:
        return self.__extrinsic_version

    @property
    def signed_extensions(self) -> tuple:
        return self.__signed_extensions

    @property
    def apis(self) -> tuple:
        return self.__apis

    def get_registry_type(self, si_type_id: int) -> dict:
        try:
            return self.__registry_types[si_type_id]
        except KeyError:
            raise UnknownTypeError(f"RegistryType not found with id {si_type_id}", type_name=si_type_id)

    def get_module(self, name: str) -> Optional[ModuleMetadata]:
        for module in self.__modules:
            if module.name == name:
                return module

    def get_module_by_index(self, index: int) -> Optional[ModuleMetadata]:
        for module in self.__modules:
            if module.index == index:
                return module

    def resolve_call(self, module_name: str, call_name: str) -> CallDescriptor:
        """
        Looks up a call by exact (case-sensitive) module and call name, e.g. ('balances', 'transfer')
        """
        call = self.__calls_by_name.get((module_name, call_name))

        if call is None:
            if self.get_module(module_name) is None:
                raise UnknownCallError(
                    f"Module '{module_name}' not found", module_name=module_name, call_name=call_name
                )
            raise UnknownCallError(
                f"Call '{call_name}' not found in module '{module_name}'", module_name=module_name, call_name=call_name
            )

        return call

    def resolve_call_index(self, module_index: int, call_index: int) -> CallDescriptor:
        call = self.__calls_by_index.get((module_index, call_index))

        if call is None:
            raise UnknownCallError(f'Call index 0x{module_index:02x}{call_index:02x} not found in metadata')

        return call

    def resolve_type(self, type_name: Union[str, int]) -> str:
        """
        Returns the type string to encode or decode a type of this runtime with. Accepts a registry type id, a full
        path (e.g. 'sp_core::crypto::AccountId32'), an unambiguous type name (e.g. 'AccountId32') or a scalecodec
        type string (e.g. 'u32', 'Compact<Balance>')
        """
        if type(type_name) is int:
            self.get_registry_type(type_name)
            return f'scale_info::{type_name}'

        if type(type_name) is not str or type_name.strip() == '':
            raise UnknownTypeError(f"Type '{type_name}' not found in metadata", type_name=type_name)

        si_type_id = self.__path_lookup.get(type_name)
        if si_type_id is not None:
            return f'scale_info::{si_type_id}'

        # Registry paths only match with exact case
        if type_name.lower() in [path.lower() for path in self.__path_lookup]:
            raise UnknownTypeError(f"Type '{type_name}' not found in metadata", type_name=type_name)

        if self.__runtime_config.get_decoder_class(type_name) is None:
            raise UnknownTypeError(f"Type '{type_name}' not found in metadata", type_name=type_name)

        return type_name

    def __fixed_byte_length(self, si_type_id: int) -> Optional[int]:
        type_def = self.get_registry_type(si_type_id)['def']

        if 'array' in type_def:
            element_def = self.get_registry_type(type_def['array']['type'])['def']
            if element_def.get('primitive') == 'u8':
                return type_def['array']['len']

        elif 'composite' in type_def and len(type_def['composite']['fields']) == 1:
            return self.__fixed_byte_length(type_def['composite']['fields'][0]['type'])

    def get_signature_schemes(self) -> dict:
        """
        Returns signature schemes declared by the extrinsic signature enum as {name: (tag, signature length)}.
        An empty dict is returned when the signature type is not an enum of fixed length byte arrays.
        """
        si_type_id = self.__extrinsic_params.get('Signature')
        if si_type_id is None:
            return {}

        type_def = self.get_registry_type(si_type_id)['def']
        if 'variant' not in type_def:
            return {}

        schemes = {}
        for variant in type_def['variant']['variants']:
            if len(variant['fields']) == 1:
                length = self.__fixed_byte_length(variant['fields'][0]['type'])
                if length is not None:
                    schemes[variant['name']] = (variant['index'], length)
        return schemes


@lru_cache(maxsize=METADATA_CACHE_SIZE)
def _parse_cached(data: bytes, ss58_format: Optional[int]) -> Metadata:
    return Metadata.parse(data, ss58_format=ss58_format)


def get_metadata(data: Union[str, bytes, Metadata], ss58_format: Optional[int] = DEFAULT_SS58_FORMAT) -> Metadata:
    """
    Returns a parsed `Metadata` for given blob, reusing a previously parsed instance for identical input
    """
    if isinstance(data, Metadata):
        return data

    if type(data) is str:
        try:
            data = bytes.fromhex(data[2:] if data[0:2] == '0x' else data)
        except ValueError as e:
            raise MetadataParseError(f'Invalid metadata hex string: {e}') from e

    if type(data) not in (bytes, bytearray):
        raise MetadataParseError(f'Unsupported metadata input type {type(data).__name__}')

    return _parse_cached(bytes(data), ss58_format)
