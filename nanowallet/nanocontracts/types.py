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

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Callable, NewType, TypeAlias

from nanowallet.nanocontracts.exception import BlueprintSyntaxError

# Types to be used by blueprints.
Address = NewType('Address', bytes)
Amount = NewType('Amount', int)
Timestamp = NewType('Timestamp', int)
TokenUid = NewType('TokenUid', bytes)
BlueprintId = NewType('BlueprintId', bytes)
ContractId = NewType('ContractId', bytes)

"""The identity of whoever calls a method, either a user address or another contract."""
CallerId: TypeAlias = Address | ContractId

# Upper bound of any amount, the same as an unsigned 256-bit integer.
MAX_AMOUNT: int = 2**256 - 1

NC_INITIALIZE_METHOD: str = 'initialize'

NC_ALLOWED_ACTIONS_ATTR = '__nc_allowed_actions'
NC_METHOD_TYPE_ATTR: str = '__nc_method_type'


class NCMethodType(Enum):
    PUBLIC = 'public'
    VIEW = 'view'


def _create_decorator_with_allowed_actions(
    *,
    decorator_body: Callable[[Callable], None],
    maybe_fn: Callable | None,
    allow_deposit: bool,
    allow_withdrawal: bool,
) -> Callable:
    """Internal utility to create a decorator that sets allowed actions."""
    def decorator(fn: Callable) -> Callable:
        allowed_actions: set[NCActionType] = set()
        if allow_deposit:
            allowed_actions.add(NCActionType.DEPOSIT)
        if allow_withdrawal:
            allowed_actions.add(NCActionType.WITHDRAWAL)
        setattr(fn, NC_ALLOWED_ACTIONS_ATTR, allowed_actions)

        decorator_body(fn)
        return fn

    if maybe_fn is not None:
        return decorator(maybe_fn)
    return decorator


def public(
    maybe_fn: Callable | None = None,
    /,
    *,
    allow_deposit: bool = False,
    allow_withdrawal: bool = False,
) -> Callable:
    """Decorator to mark a blueprint method as public."""
    def decorator(fn: Callable) -> None:
        if getattr(fn, NC_METHOD_TYPE_ATTR, None) is not None:
            raise BlueprintSyntaxError(f'method must be annotated with at most one method type: `{fn.__name__}()`')
        setattr(fn, NC_METHOD_TYPE_ATTR, NCMethodType.PUBLIC)

    return _create_decorator_with_allowed_actions(
        decorator_body=decorator,
        maybe_fn=maybe_fn,
        allow_deposit=allow_deposit,
        allow_withdrawal=allow_withdrawal,
    )


def view(fn: Callable) -> Callable:
    """Decorator to mark a blueprint method as view (read-only)."""
    if getattr(fn, NC_METHOD_TYPE_ATTR, None) is not None:
        raise BlueprintSyntaxError(f'method must be annotated with at most one method type: `{fn.__name__}()`')
    setattr(fn, NC_METHOD_TYPE_ATTR, NCMethodType.VIEW)
    return fn


@unique
class NCActionType(Enum):
    """
    Types of interactions a call might have with a contract balance.
    Check the respective dataclasses below for more info.
    """
    DEPOSIT = 1
    WITHDRAWAL = 2

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, frozen=True, kw_only=True)
class BaseAction:
    """The base dataclass for all NC actions. Shouldn't be instantiated directly."""
    token_uid: TokenUid
    amount: int

    @property
    def type(self) -> NCActionType:
        """The respective NCActionType for each NCAction."""
        action_types: dict[type[BaseAction], NCActionType] = {
            NCDepositAction: NCActionType.DEPOSIT,
            NCWithdrawalAction: NCActionType.WITHDRAWAL,
        }

        if action_type := action_types.get(type(self)):
            return action_type

        raise NotImplementedError(f'unknown action type {type(self)}')

    @property
    def name(self) -> str:
        """The action name."""
        return str(self.type)

    def to_json(self) -> dict[str, Any]:
        """
        Convert this action to a json dict.

        >>> NCDepositAction(token_uid=TokenUid(b'\x01'), amount=123).to_json()
        {'type': 'deposit', 'token_uid': '01', 'amount': 123}
        >>> NCWithdrawalAction(token_uid=TokenUid(b'\x01'), amount=123).to_json()
        {'type': 'withdrawal', 'token_uid': '01', 'amount': 123}
        """
        return dict(
            type=self.name.lower(),
            token_uid=self.token_uid.hex(),
            amount=self.amount,
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class NCDepositAction(BaseAction):
    """Deposit tokens from the caller into the contract."""


@dataclass(slots=True, frozen=True, kw_only=True)
class NCWithdrawalAction(BaseAction):
    """Withdraw tokens from the contract to the caller."""


"""A sum type representing all possible nano contract actions."""
NCAction: TypeAlias = NCDepositAction | NCWithdrawalAction
