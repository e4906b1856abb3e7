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

from nanowallet.nanocontracts.blueprints.wallet.events import WhitelistAdditionEvent, WhitelistRemovalEvent
from nanowallet.nanocontracts.blueprints.wallet.exceptions import InvalidArgumentError, ProtocolStateError
from nanowallet.nanocontracts.blueprints.wallet.pending import PendingAddressBatch
from nanowallet.nanocontracts.blueprints.wallet.utils import check_address
from nanowallet.nanocontracts.component import Component
from nanowallet.nanocontracts.types import Address


class Whitelist(Component):
    """Addresses a wallet may send to without spending from its daily limit.

    Additions and removals are staged in their own pending slot and applied by a confirmation. The very first addition
    is the only exception, it is applied right away so a new wallet can be set up by its owner alone. Removals have no
    such exception.
    """

    initialized: bool
    whitelisted: set[Address]
    addition: PendingAddressBatch
    removal: PendingAddressBatch

    def setup(self) -> None:
        self.initialized = False
        self.whitelisted = set()
        self.addition.setup()
        self.removal.setup()

    def contains(self, address: Address) -> bool:
        return address in self.whitelisted

    def _check_batch(self, addresses: list[Address]) -> None:
        max_batch_size = self.syscall.get_settings().WALLET_MAX_BATCH_SIZE
        if len(addresses) > max_batch_size:
            raise InvalidArgumentError(f'too many addresses: {len(addresses)} > {max_batch_size}')
        for address in addresses:
            check_address(address)

    def add(self, addresses: list[Address]) -> None:
        """Add addresses right away when the whitelist was never initialized, otherwise submit them for
        confirmation."""
        if not self.initialized:
            self._check_batch(addresses)
            self._apply_addition(addresses)
            self.initialized = True
            return
        self.addition.require_not_submitted()
        self._check_batch(addresses)
        self.addition.submit(addresses)
        self.log.info('whitelist addition submitted', count=len(addresses))

    def confirm_addition(self) -> None:
        if not self.addition.is_submitted() or not self.addition.peek():
            raise ProtocolStateError('no whitelist addition submitted')
        self._apply_addition(self.addition.take())

    def cancel_addition(self) -> None:
        self.addition.cancel()

    def _apply_addition(self, addresses: list[Address]) -> None:
        self.whitelisted.update(addresses)
        self.log.info('whitelist addition applied', count=len(addresses))
        self.syscall.emit_event(WhitelistAdditionEvent(addresses=addresses).json_dumpb())

    def remove(self, addresses: list[Address]) -> None:
        """Submit addresses to be removed, always waiting for a confirmation."""
        self.removal.require_not_submitted()
        self._check_batch(addresses)
        self.removal.submit(addresses)
        self.log.info('whitelist removal submitted', count=len(addresses))

    def confirm_removal(self) -> None:
        if not self.removal.is_submitted() or not self.removal.peek():
            raise ProtocolStateError('no whitelist removal submitted')
        addresses = self.removal.take()
        self.whitelisted.difference_update(addresses)
        self.log.info('whitelist removal applied', count=len(addresses))
        self.syscall.emit_event(WhitelistRemovalEvent(addresses=addresses).json_dumpb())

    def cancel_removal(self) -> None:
        self.removal.cancel()
