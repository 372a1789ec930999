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


class TxWrapperException(Exception):
    pass


class ConfigurationError(TxWrapperException):
    pass


class MetadataParseError(TxWrapperException):
    pass


class UnknownCallError(TxWrapperException, ValueError):

    def __init__(self, message, module_name=None, call_name=None):
        super().__init__(message)
        self.module_name = module_name
        self.call_name = call_name


class UnknownTypeError(TxWrapperException, ValueError):

    def __init__(self, message, type_name=None):
        super().__init__(message)
        self.type_name = type_name


class MissingArgumentError(TxWrapperException, ValueError):

    def __init__(self, message, argument_name=None):
        super().__init__(message)
        self.argument_name = argument_name


class EncodeError(TxWrapperException, ValueError):
    pass


class ArgumentTypeError(EncodeError):

    def __init__(self, message, argument_name=None):
        super().__init__(message)
        self.argument_name = argument_name


class UnexpectedArgumentError(ArgumentTypeError):
    pass


class DecodeError(TxWrapperException, ValueError):
    pass


class DecodeFormatError(DecodeError):

    def __init__(self, message, attempts=None):
        super().__init__(message)
        # List of (candidate format, reason) tuples
        self.attempts = attempts or []

    @property
    def attempted_formats(self) -> list:
        return [name for name, _ in self.attempts]


class InvalidSignatureLengthError(TxWrapperException, ValueError):

    def __init__(self, message, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
