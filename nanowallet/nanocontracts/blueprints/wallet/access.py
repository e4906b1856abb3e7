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

from collections.abc import Iterable

from nanowallet.nanocontracts.blueprints.wallet.events import AddedControllerEvent, RemovedControllerEvent
from nanowallet.nanocontracts.blueprints.wallet.exceptions import AuthorizationError
from nanowallet.nanocontracts.component import Component
from nanowallet.nanocontracts.types import Address, CallerId


class AccessRegistry(Component):
    """Owner and controllers of a wallet.

    The owner is set once and proposes changes, the controllers confirm or cancel them. Roles are checked
    independently, so the same address may be both. Any controller may add or remove any controller, itself included.
    """

    owner: Address
    controllers: set[Address]

    def setup(self, owner: Address, controllers: Iterable[Address]) -> None:
        self.owner = owner
        self.controllers = controllers

    def is_owner(self, caller_id: CallerId) -> bool:
        return caller_id == self.owner

    def is_controller(self, caller_id: CallerId) -> bool:
        return caller_id in self.controllers

    def require_owner(self, caller_id: CallerId) -> None:
        if not self.is_owner(caller_id):
            raise AuthorizationError('caller is not the owner')

    def require_controller(self, caller_id: CallerId) -> None:
        if not self.is_controller(caller_id):
            raise AuthorizationError('caller is not a controller')

    def require_owner_or_controller(self, caller_id: CallerId) -> None:
        if not self.is_owner(caller_id) and not self.is_controller(caller_id):
            raise AuthorizationError('caller is neither the owner nor a controller')

    def add_controller(self, caller_id: CallerId, controller: Address) -> None:
        """Add a controller. Adding an existing controller changes nothing, but the event is still emitted."""
        self.require_controller(caller_id)
        self.controllers.add(controller)
        self.log.info('controller added', controller=controller)
        self.syscall.emit_event(AddedControllerEvent(sender=caller_id, controller=controller).json_dumpb())

    def remove_controller(self, caller_id: CallerId, controller: Address) -> None:
        """Remove a controller. Removing an address that is not a controller changes nothing."""
        self.require_controller(caller_id)
        self.controllers.discard(controller)
        self.log.info('controller removed', controller=controller)
        self.syscall.emit_event(RemovedControllerEvent(sender=caller_id, controller=controller).json_dumpb())
