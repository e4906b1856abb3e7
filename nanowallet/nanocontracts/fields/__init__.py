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

from typing import Any, TypeVar, get_args, get_origin

from nanowallet.nanocontracts.fields.containers import (
    ContainerField,
    DictContainer,
    ListContainer,
    SetContainer,
    _Container,
)
from nanowallet.nanocontracts.fields.field import Field, SingleField

__all__ = [
    'TYPE_TO_CONTAINER_MAP',
    'ContainerField',
    'DictContainer',
    'Field',
    'ListContainer',
    'SetContainer',
    'SingleField',
    'make_field_for_type',
]

T = TypeVar('T')

TYPE_TO_CONTAINER_MAP: dict[type, type[_Container]] = {
    dict: DictContainer,
    list: ListContainer,
    set: SetContainer,
}

# Values of these types are immutable, so they can be stored as they are.
SINGLE_FIELD_TYPES: tuple[type, ...] = (bool, int, str, bytes)


def _resolve_new_type(type_: Any) -> Any:
    """Return the concrete type behind a NewType, like bytes for Address."""
    while hasattr(type_, '__supertype__'):
        type_ = type_.__supertype__
    return type_


def make_field_for_type(name: str, type_: type[T], /) -> Field[T]:
    """Build the field for an annotation of a blueprint or a component.

    It raises TypeError when the type is not supported.
    """
    from nanowallet.nanocontracts.component import Component, ComponentField, get_abstract_methods

    origin = get_origin(type_)
    if origin is not None:
        container_class = TYPE_TO_CONTAINER_MAP.get(origin)
        if container_class is None:
            raise TypeError(f'unsupported container type: {origin.__name__}')
        for arg in get_args(type_):
            _check_single_type(_resolve_new_type(arg))
        return ContainerField(name, container_class)

    if isinstance(type_, type) and issubclass(type_, Component):
        abstract_methods = get_abstract_methods(type_)
        if abstract_methods:
            raise TypeError(f'abstract component {type_.__name__} must implement: {", ".join(sorted(abstract_methods))}')
        return ComponentField(name, type_)

    concrete_type = _resolve_new_type(type_)
    _check_single_type(concrete_type)
    return SingleField(name, concrete_type)


def _check_single_type(type_: Any) -> None:
    if type_ not in SINGLE_FIELD_TYPES:
        raise TypeError(f'unsupported field type: {type_!r}')
