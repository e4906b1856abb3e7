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

from abc import abstractmethod
from typing import Generic, TypeVar

from nanowallet.nanocontracts.blueprints.wallet.exceptions import ProtocolStateError
from nanowallet.nanocontracts.component import Component
from nanowallet.nanocontracts.types import Address

T = TypeVar('T')


class PendingOperationSlot(Component, Generic[T]):
    """A single slot holding a proposed change until a second party confirms or cancels it.

    The slot goes from empty to submitted on `submit()` and back to empty on `take()` (used to confirm) or `cancel()`.
    Only one proposal may be in flight, a second `submit()` fails instead of replacing or queueing it. A proposal never
    expires.

    Who may submit, confirm or cancel is decided by the owner of the slot, never by the slot itself.

    This class only defines the protocol. A field must be declared with a subclass that implements `_store()`,
    `_load()` and `_clear()`, like `PendingAddressBatch` or `PendingAmount`.
    """

    submitted: bool

    def setup(self) -> None:
        self.submitted = False
        self._clear()

    def is_submitted(self) -> bool:
        return self.submitted

    def require_not_submitted(self) -> None:
        if self.submitted:
            raise ProtocolStateError('an operation is already submitted')

    def submit(self, value: T) -> None:
        """Store a proposal. It fails if another one is still pending."""
        self.require_not_submitted()
        self._store(value)
        self.submitted = True

    def peek(self) -> T:
        """Return the pending proposal without touching the slot."""
        return self._load()

    def take(self) -> T:
        """Return the pending proposal and empty the slot. It fails if nothing is pending."""
        if not self.submitted:
            raise ProtocolStateError('no operation submitted')
        value = self._load()
        self.cancel()
        return value

    def cancel(self) -> None:
        """Discard the pending proposal. Cancelling an empty slot is allowed and changes nothing."""
        self._clear()
        self.submitted = False

    @abstractmethod
    def _store(self, value: T) -> None:
        raise NotImplementedError

    @abstractmethod
    def _load(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def _clear(self) -> None:
        raise NotImplementedError


class PendingAddressBatch(PendingOperationSlot[list[Address]]):
    """A pending batch of addresses, like a whitelist addition."""

    proposed: list[Address]

    def _store(self, value: list[Address]) -> None:
        self.proposed = value

    def _load(self) -> list[Address]:
        return list(self.proposed)

    def _clear(self) -> None:
        self.proposed.clear()


class PendingAmount(PendingOperationSlot[int]):
    """A pending amount, like a new daily limit. An empty slot holds zero."""

    proposed: int

    def _store(self, value: int) -> None:
        self.proposed = value

    def _load(self) -> int:
        return self.proposed

    def _clear(self) -> None:
        self.proposed = 0
