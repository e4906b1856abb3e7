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

import pickle
from typing import Any

from typing_extensions import override

from nanowallet.nanocontracts.storage.contract_storage import AttrKey, BalanceKey, NCContractStorage, NCStorageFactory
from nanowallet.nanocontracts.storage.types import _NOT_PROVIDED, DeletedKey, DeletedKeyType


class NCMemoryStorage(NCContractStorage):
    """Memory implementation of the storage.

    Values are pickled on the way in and out, so callers never share a mutable object with the storage."""

    def __init__(self, *, nc_id: bytes) -> None:
        super().__init__()

        # State (balances and attributes)
        self._attrs: dict[AttrKey, bytes] = {}
        self._balances: dict[BalanceKey, int] = {}

        # Contract id or address
        self.nc_id = nc_id

    def _serialize(self, value: Any) -> bytes:
        """Serialize a value to be stored."""
        return pickle.dumps(value)

    def _deserialize(self, _bytes: bytes) -> Any:
        """Deserialize a stored value."""
        value = pickle.loads(_bytes)
        if isinstance(value, DeletedKeyType):
            return DeletedKey
        return value

    def _to_attr_key(self, key: str) -> AttrKey:
        """Return the actual key used in the storage."""
        return AttrKey(self.nc_id, key)

    @override
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        internal_key = self._to_attr_key(key)
        value_bytes = self._attrs.get(internal_key)
        if value_bytes is None:
            if default is _NOT_PROVIDED:
                raise KeyError(key)
            return default
        return self._deserialize(value_bytes)

    @override
    def put(self, key: str, value: Any) -> None:
        self.check_if_locked()
        internal_key = self._to_attr_key(key)
        self._attrs[internal_key] = self._serialize(value)

    @override
    def delete(self, key: str) -> None:
        self.check_if_locked()
        internal_key = self._to_attr_key(key)
        self._attrs.pop(internal_key, None)

    @override
    def get_balance(self, token_uid: bytes) -> int:
        key = BalanceKey(self.nc_id, token_uid)
        return self._balances.get(key, 0)

    @override
    def get_all_balances(self) -> dict[BalanceKey, int]:
        return dict(self._balances)

    @override
    def add_balance(self, token_uid: bytes, amount: int) -> None:
        self.check_if_locked()
        key = BalanceKey(self.nc_id, token_uid)
        self._balances[key] = self._balances.get(key, 0) + amount

    @override
    def commit(self) -> None:
        # Memory storage applies every change immediately.
        pass


class NCMemoryStorageFactory(NCStorageFactory):
    """Factory to create a memory storage for a contract or address.

    As it is a memory storage, the factory keeps all storages in memory so the same account always gets the same
    storage back.
    """

    def __init__(self) -> None:
        self._storages: dict[bytes, NCMemoryStorage] = {}

    @override
    def __call__(self, nc_id: bytes) -> NCMemoryStorage:
        storage = self._storages.get(nc_id)
        if storage is None:
            storage = NCMemoryStorage(nc_id=nc_id)
            self._storages[nc_id] = storage
        return storage
