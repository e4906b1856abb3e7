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

from types import MappingProxyType
from typing import Any, Sequence, final

from nanowallet.crypto.util import get_address_b58_from_bytes
from nanowallet.nanocontracts.exception import NCFail, NCInvalidContext
from nanowallet.nanocontracts.types import CallerId, NCAction, Timestamp, TokenUid

_EMPTY_MAP: MappingProxyType[TokenUid, NCAction] = MappingProxyType({})


@final
class Context:
    """Context passed to a method call. An empty list of actions means the
    method is being called with no deposits and withdrawals.

    Actions are indexed by token and there is at most one action per token, so it is
    impossible to have both a deposit and a withdrawal for the same token.

    The timestamp is the one the host assigned to the operation, contracts must never read any other clock.
    """
    __slots__ = ('__actions', '__caller_id', '__timestamp')
    __caller_id: CallerId
    __timestamp: Timestamp
    __actions: MappingProxyType[TokenUid, NCAction]

    @staticmethod
    def __group_actions__(actions: Sequence[NCAction]) -> MappingProxyType[TokenUid, NCAction]:
        actions_map: dict[TokenUid, NCAction] = {}
        for action in actions:
            if action.amount <= 0:
                raise NCInvalidContext(f'action amount must be positive: {action.amount}')
            if action.token_uid in actions_map:
                raise NCInvalidContext(f'duplicate action for token {action.token_uid.hex()}')
            actions_map[action.token_uid] = action
        return MappingProxyType(actions_map)

    def __init__(
        self,
        *,
        caller_id: CallerId,
        timestamp: int,
        actions: Sequence[NCAction] = (),
    ) -> None:
        # Map of action where the key is the token_uid.
        # If empty, it is a method call without any actions.
        self.__actions = self.__group_actions__(actions) if actions else _EMPTY_MAP

        # Address or contract calling the method.
        self.__caller_id = caller_id

        # Timestamp of the operation, as assigned by the host.
        self.__timestamp = Timestamp(int(timestamp))

    @property
    def caller_id(self) -> CallerId:
        """Get the caller ID which can be either an Address or a ContractId."""
        return self.__caller_id

    @property
    def timestamp(self) -> Timestamp:
        return self.__timestamp

    @property
    def actions(self) -> MappingProxyType[TokenUid, NCAction]:
        """Get a mapping of actions per token."""
        return self.__actions

    @property
    def actions_list(self) -> Sequence[NCAction]:
        """Get a list of all actions."""
        return tuple(self.__actions.values())

    def get_single_action(self, token_uid: TokenUid) -> NCAction:
        """Get the action for the provided token, and fail if there is none."""
        action = self.actions.get(token_uid)
        if action is None:
            raise NCFail(f'expected exactly 1 action for token {token_uid.hex()}')
        return action

    def copy_for_caller(self, caller_id: CallerId, actions: Sequence[NCAction] = ()) -> Context:
        """Return a context for a call made by another contract during the same operation."""
        return Context(caller_id=caller_id, timestamp=self.timestamp, actions=actions)

    def to_json(self) -> dict[str, Any]:
        """Return a JSON representation of the context."""
        return {
            'actions': [action.to_json() for action in self.actions_list],
            'caller_id': get_address_b58_from_bytes(self.caller_id),
            'timestamp': self.timestamp,
        }
