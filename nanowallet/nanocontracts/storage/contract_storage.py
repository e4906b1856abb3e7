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

from abc import ABC, abstractmethod
from typing import Any, NamedTuple

from nanowallet.nanocontracts.exception import NCViewMethodError
from nanowallet.nanocontracts.storage.types import _NOT_PROVIDED


class AttrKey(NamedTuple):
    nc_id: bytes
    key: str


class BalanceKey(NamedTuple):
    nc_id: bytes
    token_uid: bytes


class NCContractStorage(ABC):
    """This is the storage used by NanoContracts. There is one instance per account, either a contract or an address.

    A locked storage rejects every write, it is how view methods are kept read-only.
    """

    def __init__(self) -> None:
        self.is_locked = False

    def lock(self) -> None:
        """Lock the storage for changes."""
        self.is_locked = True

    def unlock(self) -> None:
        """Unlock the storage."""
        self.is_locked = False

    def check_if_locked(self) -> None:
        """Raise a NCViewMethodError if the storage is locked."""
        if self.is_locked:
            raise NCViewMethodError('cannot change the state of a locked storage')

    def has(self, key: str) -> bool:
        """Return whether `key` is set."""
        try:
            self.get(key)
        except KeyError:
            return False
        return True

    @abstractmethod
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        """Return the value of the provided `key`.

        It raises KeyError if key is not found and no default is provided.
        """
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Store the `value` for the provided `key`.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete `key` from storage.
        """
        raise NotImplementedError

    @abstractmethod
    def get_balance(self, token_uid: bytes) -> int:
        """Return the account balance for a token."""
        raise NotImplementedError

    @abstractmethod
    def get_all_balances(self) -> dict[BalanceKey, int]:
        """Return the account balances of all tokens."""
        raise NotImplementedError

    @abstractmethod
    def add_balance(self, token_uid: bytes, amount: int) -> None:
        """Change the account balance for a token. The amount will be added to the previous balance.

        Note that the amount might be negative."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """Flush all local changes to the storage."""
        raise NotImplementedError


class NCStorageFactory(ABC):
    """Build the storage of an account the first time the runner touches it."""

    @abstractmethod
    def __call__(self, nc_id: bytes) -> NCContractStorage:
        """Return a storage object for a given contract or address."""
        raise NotImplementedError
