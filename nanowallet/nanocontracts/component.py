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

from typing import TYPE_CHECKING, Any, TypeVar, final

from nanowallet.nanocontracts.blueprint import setup_fields
from nanowallet.nanocontracts.fields.field import Field

if TYPE_CHECKING:
    from nanowallet.nanocontracts.blueprint_env import BlueprintEnvironment
    from nanowallet.nanocontracts.nc_exec_logs import NCLogger

C = TypeVar('C', bound='Component')


class _ComponentBase(type):
    """Metaclass for components. It creates the fields of a component the same way blueprints do."""

    def __new__(
        cls: type[_ComponentBase],
        name: str,
        bases: tuple[type, ...],
        attrs: dict[str, Any],
        /,
        **kwargs: Any
    ) -> _ComponentBase:
        parents = [b for b in bases if isinstance(b, _ComponentBase)]
        if not parents:
            return super().__new__(cls, name, bases, attrs, **kwargs)

        attrs['__slots__'] = tuple()
        new_class = super().__new__(cls, name, bases, attrs, **kwargs)
        setup_fields(new_class, attrs)
        return new_class


class Component(metaclass=_ComponentBase):
    """A reusable piece of contract state with its own behavior.

    Components are declared as annotated attributes of a blueprint (or of another component). Their fields live in the
    storage of the contract that owns them, under a prefix made of the attribute path, so a blueprint may hold many
    components of the same class.

    Example:

        class Counter(Component):
            value: int

            def increment(self) -> None:
                self.value += 1

        class MyBlueprint(Blueprint):
            hits: Counter
    """

    __slots__ = ('__owner', '__field_prefix__')

    def __init__(self, owner: Any, name: str) -> None:
        self.__owner = owner
        self.__field_prefix__ = f'{owner.__field_prefix__}{name}.'

    @final
    @property
    def syscall(self) -> BlueprintEnvironment:
        """Return the syscall provider of the contract that owns this component."""
        return self.__owner.syscall

    @final
    @property
    def log(self) -> NCLogger:
        """Return the logger of the contract that owns this component."""
        return self.syscall.__log__


def get_abstract_methods(component_class: type[Component]) -> set[str]:
    """Return the names of the methods marked with `@abstractmethod` that the class still does not implement."""
    names: set[str] = set()
    for klass in reversed(component_class.__mro__):
        for attr_name, value in vars(klass).items():
            if getattr(value, '__isabstractmethod__', False):
                names.add(attr_name)
            else:
                names.discard(attr_name)
    return names


class ComponentField(Field[C]):
    """A field that binds a component to its owner. Components cannot be assigned, only their fields can."""

    __slots__ = ('component_class',)

    def __init__(self, name: str, component_class: type[C]) -> None:
        super().__init__(name)
        self.component_class = component_class

    def __get__(self, instance: Any, owner: object | None = None) -> C:
        if instance is None:
            return self  # type: ignore[return-value]
        return self.component_class(instance, self.name)

    def __set__(self, instance: Any, value: C) -> None:
        raise AttributeError(f'component cannot be assigned: `{self.name}`')
