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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from nanowallet.nanocontracts.exception import NCAttributeError

if TYPE_CHECKING:
    from nanowallet.nanocontracts.storage import NCContractStorage

T = TypeVar('T')

KEY_SEPARATOR: str = ':'


class Field(Generic[T], ABC):
    """ This class is used to model the fields of a Blueprint from the signature that defines them.

    Fields are generally free to implement how they behave, but we have 2 types of behavior:

    - `self.foo = 1` will save `1` on a key derived from the `'foo'` name
    - `self.foo['bar'] = 'baz'` will save `'baz'` on a key derived from `('foo', 'bar')`

    The key is prefixed with the `__field_prefix__` of the instance, which is empty for blueprints and is the path of
    the component for components, so two components of the same class never share keys.
    """

    __slots__ = ('name',)

    def __init__(self, name: str) -> None:
        assert name.isidentifier()
        self.name = name

    def _storage_key(self, instance: Any) -> str:
        return f'{instance.__field_prefix__}{self.name}'

    @staticmethod
    def _storage(instance: Any) -> NCContractStorage:
        return instance.syscall.__storage__

    @abstractmethod
    def __get__(self, instance: Any, owner: object | None = None) -> T:
        raise NotImplementedError

    @abstractmethod
    def __set__(self, instance: Any, value: T) -> None:
        raise NotImplementedError


class SingleField(Field[T]):
    """A field holding a single immutable value, like an int or bytes."""

    __slots__ = ('type_',)

    def __init__(self, name: str, type_: type[T]) -> None:
        super().__init__(name)
        self.type_ = type_

    def __get__(self, instance: Any, owner: object | None = None) -> T:
        if instance is None:
            return self  # type: ignore[return-value]
        try:
            return self._storage(instance).get(self._storage_key(instance))
        except KeyError:
            raise NCAttributeError(f'attribute not initialized: `{self.name}`')

    def __set__(self, instance: Any, value: T) -> None:
        if not isinstance(value, self.type_):
            raise NCAttributeError(
                f'invalid value for `{self.name}`: expected {self.type_.__name__}, got {type(value).__name__}'
            )
        self._storage(instance).put(self._storage_key(instance), value)

    def __delete__(self, instance: Any) -> None:
        self._storage(instance).delete(self._storage_key(instance))
