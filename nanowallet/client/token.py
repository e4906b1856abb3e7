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

from typing import Optional

from typing_extensions import Self

from nanowallet.client.base import ContractClient
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.types import Address, CallerId


class TokenClient(ContractClient):
    """Client of the FungibleToken blueprint. The token uid is the contract id."""

    blueprint_name = 'FungibleToken'

    @classmethod
    def deploy(
        cls,
        runner: Runner,
        sender: CallerId,
        *,
        name: str,
        symbol: str,
        supply: int,
        salt: Optional[bytes] = None,
    ) -> Self:
        return cls._deploy(runner, sender, name, symbol, supply, salt=salt)

    def transfer(self, sender: CallerId, to: Address, amount: int) -> bool:
        return self.transact(sender, 'transfer', to, amount)

    def balance_of(self, account: CallerId) -> int:
        return self.call('balance_of', account)

    def total_supply(self) -> int:
        return self.call('total_supply')
