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

from nanowallet.nanocontracts.exception import NCFail


class AuthorizationError(NCFail):
    """Raised when the caller is not the owner or a controller, as the operation requires."""


class InvalidArgumentError(NCFail):
    """Raised on a zero amount, a batch over the size cap, a zero oracle rate, and other bad arguments."""


class ProtocolStateError(NCFail):
    """Raised when a submission is already pending, or when there is nothing pending to confirm."""


class InsufficientBudgetError(NCFail):
    """Raised when a transfer to a non-whitelisted address exceeds what is left of the daily limit."""


class ExternalCallFailureError(NCFail):
    """Raised when a token transfer reports failure or a native currency send fails."""
