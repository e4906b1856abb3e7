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

import itertools
from types import MappingProxyType
from typing import Any

from typing_extensions import override

from nanowallet.nanocontracts.exception import NCInsufficientFunds, NCViewMethodError
from nanowallet.nanocontracts.storage.contract_storage import AttrKey, BalanceKey, NCContractStorage
from nanowallet.nanocontracts.storage.types import _NOT_PROVIDED, DeletedKey


class NCChangesTracker(NCContractStorage):
    """Keep track of changes during the execution of an operation.

    These changes are not committed to the storage until `commit()` is called, and `reset()` discards them."""

    def __init__(self, nc_id: bytes, storage: NCContractStorage):
        super().__init__()
        self.storage = storage
        self.nc_id = nc_id

        self.data: dict[AttrKey, Any] = {}
        self._balance_diff: dict[BalanceKey, int] = {}

        self.has_been_commited = False

    def get_balance_diff(self) -> MappingProxyType[BalanceKey, int]:
        """Return the balance diff of this change tracker."""
        return MappingProxyType(self._balance_diff)

    def _to_key(self, key: str) -> AttrKey:
        """Return the actual key used in the storage."""
        return AttrKey(self.nc_id, key)

    @override
    def check_if_locked(self) -> None:
        """Check if this instance has been locked. A lock occurs during view calls and after a commit."""
        if self.has_been_commited:
            raise RuntimeError('you cannot change any value after the commit has been executed')
        if self.is_locked:
            raise NCViewMethodError('cannot change the state of a contract during a view call')

    @override
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        internal_key = self._to_key(key)
        if internal_key in self.data:
            value = self.data[internal_key]
        else:
            value = self.storage.get(key, default=default)
        if value is DeletedKey:
            if default is _NOT_PROVIDED:
                raise KeyError(key)
            return default
        return value

    @override
    def put(self, key: str, value: Any) -> None:
        self.check_if_locked()
        internal_key = self._to_key(key)
        self.data[internal_key] = value

    @override
    def delete(self, key: str) -> None:
        self.check_if_locked()
        internal_key = self._to_key(key)
        self.data[internal_key] = DeletedKey

    @override
    def commit(self) -> None:
        """Save the changes in the storage."""
        self.check_if_locked()
        for (_, key), value in self.data.items():
            if value is not DeletedKey:
                self.storage.put(key, value)
            else:
                self.storage.delete(key)

        for (_, token_uid), amount in self._balance_diff.items():
            self.storage.add_balance(token_uid, amount)

        self.has_been_commited = True

    def reset(self) -> None:
        """Discard all local changes without persisting."""
        self.data = {}
        self._balance_diff = {}

    @override
    def get_balance(self, token_uid: bytes) -> int:
        internal_key = BalanceKey(self.nc_id, token_uid)
        balance_diff = self._balance_diff.get(internal_key, 0)
        return self.storage.get_balance(token_uid) + balance_diff

    def validate_balances(self) -> None:
        """Check that all final balances are positive. If not, it raises NCInsufficientFunds."""
        for _, token_uid in self._balance_diff.keys():
            balance = self.get_balance(token_uid)
            if balance < 0:
                raise NCInsufficientFunds(
                    f'negative balance for {self.nc_id.hex()} (balance={balance} token_uid={token_uid.hex()})'
                )

    @override
    def get_all_balances(self) -> dict[BalanceKey, int]:
        all_balance_keys: itertools.chain[BalanceKey] = itertools.chain(
            self.storage.get_all_balances().keys(),
            # There might be tokens in the change tracker that are still
            # not on storage, so we must check and add them as well
            self._balance_diff.keys(),
        )

        return {key: self.get_balance(key.token_uid) for key in set(all_balance_keys)}

    @override
    def add_balance(self, token_uid: bytes, amount: int) -> None:
        self.check_if_locked()
        internal_key = BalanceKey(self.nc_id, token_uid)
        old = self._balance_diff.get(internal_key, 0)
        new = old + amount
        self._balance_diff[internal_key] = new

    def is_empty(self) -> bool:
        """Return whether this tracker holds no change at all."""
        return not self.data and not any(self._balance_diff.values())
