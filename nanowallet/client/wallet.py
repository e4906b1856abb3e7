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

from typing import Iterator, Optional, Sequence

from typing_extensions import Self

from nanowallet.conf.settings import NATIVE_TOKEN_UID
from nanowallet.client.base import ContractClient
from nanowallet.nanocontracts.blueprints.wallet.events import WalletEvent, parse_event
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.types import Address, CallerId, ContractId, NCDepositAction, TokenUid


class WalletClient(ContractClient):
    """Client of the Wallet blueprint."""

    blueprint_name = 'Wallet'

    @classmethod
    def deploy(
        cls,
        runner: Runner,
        sender: CallerId,
        *,
        owner: Address,
        controllers: Sequence[Address],
        oracle: ContractId,
        daily_limit: int,
        salt: Optional[bytes] = None,
    ) -> Self:
        return cls._deploy(runner, sender, owner, list(controllers), oracle, daily_limit, salt=salt)

    # Transactors

    def deposit(self, sender: CallerId, amount: int) -> None:
        actions = [NCDepositAction(token_uid=TokenUid(NATIVE_TOKEN_UID), amount=amount)] if amount > 0 else []
        self.transact(sender, 'deposit', actions=actions)

    def add_controller(self, sender: CallerId, controller: Address) -> None:
        self.transact(sender, 'add_controller', controller)

    def remove_controller(self, sender: CallerId, controller: Address) -> None:
        self.transact(sender, 'remove_controller', controller)

    def add_to_whitelist(self, sender: CallerId, addresses: Sequence[Address]) -> None:
        self.transact(sender, 'add_to_whitelist', list(addresses))

    def add_to_whitelist_confirm(self, sender: CallerId) -> None:
        self.transact(sender, 'add_to_whitelist_confirm')

    def add_to_whitelist_cancel(self, sender: CallerId) -> None:
        self.transact(sender, 'add_to_whitelist_cancel')

    def remove_from_whitelist(self, sender: CallerId, addresses: Sequence[Address]) -> None:
        self.transact(sender, 'remove_from_whitelist', list(addresses))

    def remove_from_whitelist_confirm(self, sender: CallerId) -> None:
        self.transact(sender, 'remove_from_whitelist_confirm')

    def remove_from_whitelist_cancel(self, sender: CallerId) -> None:
        self.transact(sender, 'remove_from_whitelist_cancel')

    def set_limit(self, sender: CallerId, amount: int) -> None:
        self.transact(sender, 'set_limit', amount)

    def set_limit_confirm(self, sender: CallerId) -> None:
        self.transact(sender, 'set_limit_confirm')

    def set_limit_cancel(self, sender: CallerId) -> None:
        self.transact(sender, 'set_limit_cancel')

    def transfer(self, sender: CallerId, to: Address, amount: int, asset: bytes = NATIVE_TOKEN_UID) -> None:
        self.transact(sender, 'transfer', to, TokenUid(asset), amount)

    def top_up_gas(self, sender: CallerId, amount: int) -> None:
        self.transact(sender, 'top_up_gas', amount)

    # Callers

    def is_owner(self, address: Address) -> bool:
        return self.call('is_owner', address)

    def is_controller(self, address: Address) -> bool:
        return self.call('is_controller', address)

    def get_owner(self) -> Address:
        return self.call('get_owner')

    def get_oracle(self) -> ContractId:
        return self.call('get_oracle')

    def is_whitelisted(self, address: Address) -> bool:
        return self.call('is_whitelisted', address)

    def is_whitelist_initialized(self) -> bool:
        return self.call('is_whitelist_initialized')

    def pending_whitelist_addition(self) -> list[Address]:
        return self.call('pending_whitelist_addition')

    def pending_whitelist_removal(self) -> list[Address]:
        return self.call('pending_whitelist_removal')

    def get_daily_limit(self) -> int:
        return self.call('get_daily_limit')

    def get_pending_limit(self) -> int:
        return self.call('get_pending_limit')

    def is_limit_change_submitted(self) -> bool:
        return self.call('is_limit_change_submitted')

    def available_limit(self, now: Optional[int] = None) -> int:
        """Return the daily limit left at `now`, which defaults to the current time of the reactor."""
        if now is None:
            now = int(self.runner.reactor.seconds())
        return self.call('available_limit', now)

    def balance(self, asset: bytes = NATIVE_TOKEN_UID) -> int:
        return self.call('balance', TokenUid(asset))

    # Filterers

    def iter_events(self, *event_types: type[WalletEvent]) -> Iterator[WalletEvent]:
        """Iterate over the decoded events of this wallet, only the given types when any is given."""
        for raw_event in self.iter_raw_events():
            event = parse_event(raw_event.data)
            if not event_types or isinstance(event, event_types):
                yield event
