# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import TypeAlias

from nanowallet.exception import NanoWalletError

"""
This module contains exceptions related to Nano Contracts.

Every exception raised during a contract execution that must fail the execution inherits from NCTransactionFail.
The runner catches them at the execution boundary, discards every pending change and re-raises.

- NCInternalException: known errors detected by the runtime itself, such as an insufficient balance.
- NCUserException: business rule violations raised by blueprint code. Blueprints use it through the NCFail alias.
- NCUnhandledUserException: any other exception escaping blueprint code, such as a ZeroDivisionError.
"""


class NCTransactionFail(NanoWalletError):
    """A super type for all exceptions that fail an NC execution."""


class NCInternalException(NCTransactionFail):
    """Known internal errors that can happen during contract execution. Not meant to be raised by blueprints."""


class NCUserException(NCTransactionFail):
    """Known user errors that can happen during contract execution, raised or subclassed by blueprints."""


class NCUnhandledUserException(NCTransactionFail):
    """Wraps an unexpected exception raised from blueprint code. The original exception is its __cause__."""


class BlueprintSyntaxError(NCInternalException):
    """Raised when a blueprint contains invalid syntax."""
    pass


class BlueprintDoesNotExist(NCInternalException):
    pass


class NCViewMethodError(NCInternalException):
    """Raised when a view method changes the state of the contract."""
    pass


class NCMethodNotFound(NCInternalException):
    """Raised when a method is not found in a nano contract."""
    pass


class NCInsufficientFunds(NCInternalException):
    """Raised when there is not enough funds to withdrawal from a nano contract."""
    pass


class NCAttributeError(NCInternalException):
    pass


class NCInvalidContext(NCInternalException):
    """Raised when trying to run a method with an invalid context."""
    pass


class NCRecursionError(NCInternalException):
    """Raised when recursion gets too deep."""


class NCNumberOfCallsExceeded(NCInternalException):
    """Raised when the total number of calls have been exceeded."""


class NCInvalidContractId(NCInternalException):
    """Raised when a contract call is invalid."""


class NCInvalidMethodCall(NCInternalException):
    """Raised when a contract calls another contract's invalid method."""


class NCAlreadyInitializedContractError(NCInternalException):
    """Raised when one tries to initialize a contract that has already been initialized."""


class NCUninitializedContractError(NCInternalException):
    """Raised when a contract calls a method from an uninitialized contract."""


class NCForbiddenAction(NCInternalException):
    """Raised when an action is forbidden on a method."""
    pass


class NCInvalidSyscall(NCInternalException):
    """Raised when a syscall is called with invalid arguments."""


class NCInvalidEvent(NCInternalException):
    """Raised when an event payload is not bytes or is too large."""
    pass


"""
Just a type alias for compatibility. Represents an exception that may only be raised from user code in blueprints.
"""
NCFail: TypeAlias = NCUserException
