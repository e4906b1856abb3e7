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

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, Mapping, TypeVar

from nanowallet.nanocontracts.exception import NCAttributeError
from nanowallet.nanocontracts.fields.field import KEY_SEPARATOR, Field

if TYPE_CHECKING:
    from nanowallet.nanocontracts.storage import NCContractStorage

K = TypeVar('K')
V = TypeVar('V')
T = TypeVar('T')

_LENGTH_KEY: str = '__length__'


def _key_repr(elem: Any) -> str:
    """Return the part of a storage key that identifies a container element."""
    if isinstance(elem, bytes):
        return elem.hex()
    return repr(elem)


class _Container:
    """Base of all containers. A container is a view over the keys of a single field, it holds no data itself."""

    __slots__ = ('__storage__', '__prefix__', '_length_key')

    def __init__(self, storage: NCContractStorage, prefix: str) -> None:
        self.__storage__ = storage
        self.__prefix__ = prefix
        self._length_key = KEY_SEPARATOR.join([prefix, _LENGTH_KEY])

    def _to_db_key(self, elem: Any) -> str:
        return KEY_SEPARATOR.join([self.__prefix__, _key_repr(elem)])

    def _get_length(self) -> int:
        return self.__storage__.get(self._length_key, default=0)

    def _set_length(self, length: int) -> None:
        assert length >= 0
        self.__storage__.put(self._length_key, length)

    def __len__(self) -> int:
        return self._get_length()

    def __init_storage__(self, initial_value: Any) -> None:
        raise NotImplementedError


class SetContainer(_Container, Generic[T]):
    """A set stored as one key per element. Membership tests never touch other elements, and there is no iteration."""

    __slots__ = ()

    def __init_storage__(self, initial_value: Iterable[T]) -> None:
        if self._get_length() > 0:
            raise NCAttributeError(f'cannot reassign a non-empty set: `{self.__prefix__}`')
        self._set_length(0)
        self.update(initial_value)

    def __iter__(self) -> Iterator[T]:
        raise NotImplementedError

    def __contains__(self, elem: T, /) -> bool:
        return self.__storage__.has(self._to_db_key(elem))

    def add(self, elem: T, /) -> None:
        key = self._to_db_key(elem)
        if self.__storage__.has(key):
            return
        self.__storage__.put(key, elem)
        self._set_length(self._get_length() + 1)

    def discard(self, elem: T, /) -> None:
        key = self._to_db_key(elem)
        if not self.__storage__.has(key):
            return
        self.__storage__.delete(key)
        self._set_length(self._get_length() - 1)

    def remove(self, elem: T, /) -> None:
        if elem not in self:
            raise KeyError(elem)
        self.discard(elem)

    def update(self, *others: Iterable[T]) -> None:
        for other in others:
            for elem in other:
                self.add(elem)

    def difference_update(self, *others: Iterable[T]) -> None:
        for other in others:
            for elem in other:
                self.discard(elem)


class DictContainer(_Container, Generic[K, V]):
    """A dict stored as one key per item. Like SetContainer, it cannot be iterated."""

    __slots__ = ()

    def __init_storage__(self, initial_value: Mapping[K, V]) -> None:
        if self._get_length() > 0:
            raise NCAttributeError(f'cannot reassign a non-empty dict: `{self.__prefix__}`')
        self._set_length(0)
        self.update(initial_value)

    def __iter__(self) -> Iterator[K]:
        raise NotImplementedError

    def __getitem__(self, key: K, /) -> V:
        return self.__storage__.get(self._to_db_key(key))

    def __setitem__(self, key: K, value: V, /) -> None:
        db_key = self._to_db_key(key)
        if not self.__storage__.has(db_key):
            self._set_length(self._get_length() + 1)
        self.__storage__.put(db_key, value)

    def __delitem__(self, key: K, /) -> None:
        db_key = self._to_db_key(key)
        if not self.__storage__.has(db_key):
            raise KeyError(key)
        self.__storage__.delete(db_key)
        self._set_length(self._get_length() - 1)

    def __contains__(self, key: K, /) -> bool:
        return self.__storage__.has(self._to_db_key(key))

    def get(self, key: K, default: V | None = None, /) -> V | None:
        return self.__storage__.get(self._to_db_key(key), default=default)

    def update(self, other: Mapping[K, V], /) -> None:
        for key, value in other.items():
            self[key] = value


class ListContainer(_Container, Generic[T]):
    """A list stored as one key per index. Unlike the other containers it keeps its order and can be iterated."""

    __slots__ = ()

    def __init_storage__(self, initial_value: Iterable[T]) -> None:
        self.clear()
        self.extend(initial_value)

    def _index_key(self, index: int) -> str:
        return KEY_SEPARATOR.join([self.__prefix__, str(index)])

    def __getitem__(self, index: int, /) -> T:
        length = self._get_length()
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError('list index out of range')
        return self.__storage__.get(self._index_key(index))

    def __iter__(self) -> Iterator[T]:
        for index in range(self._get_length()):
            yield self.__storage__.get(self._index_key(index))

    def __contains__(self, elem: T, /) -> bool:
        return any(item == elem for item in self)

    def append(self, elem: T, /) -> None:
        length = self._get_length()
        self.__storage__.put(self._index_key(length), elem)
        self._set_length(length + 1)

    def extend(self, elems: Iterable[T], /) -> None:
        for elem in elems:
            self.append(elem)

    def clear(self) -> None:
        for index in range(self._get_length()):
            self.__storage__.delete(self._index_key(index))
        self._set_length(0)


class ContainerField(Field[T]):
    """A field whose value is a container. Reading it returns the container, assigning an iterable to it replaces the
    content of the container."""

    __slots__ = ('container_class',)

    def __init__(self, name: str, container_class: type[_Container]) -> None:
        super().__init__(name)
        self.container_class = container_class

    def __get__(self, instance: Any, owner: object | None = None) -> T:
        if instance is None:
            return self  # type: ignore[return-value]
        return self.container_class(self._storage(instance), self._storage_key(instance))  # type: ignore[return-value]

    def __set__(self, instance: Any, value: T) -> None:
        container = self.container_class(self._storage(instance), self._storage_key(instance))
        container.__init_storage__(value)
