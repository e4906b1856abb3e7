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

from nanowallet.nanocontracts.blueprint import Blueprint
from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.exception import NCFail
from nanowallet.nanocontracts.types import Address, CallerId, public, view


class FungibleToken(Blueprint):
    """A minimal fungible token that keeps its own ledger.

    The whole supply is given to the creator. Transfers move units from the caller, which may be a user address or
    another contract, and report failure by returning False instead of failing the call.
    """

    name: str
    symbol: str
    supply: int
    balances: dict[bytes, int]

    @public
    def initialize(self, ctx: Context, name: str, symbol: str, supply: int) -> None:
        """Initialize the contract."""
        if supply < 0:
            raise InvalidSupply(f'supply cannot be negative: {supply}')
        self.name = name
        self.symbol = symbol
        self.supply = supply
        self.balances = {ctx.caller_id: supply}

    @public
    def transfer(self, ctx: Context, to: Address, amount: int) -> bool:
        """Move `amount` from the caller to `to`. Return False when the amount is not positive or is not available."""
        sender = ctx.caller_id
        sender_balance = self._balance(sender)
        if amount <= 0 or sender_balance < amount:
            self.log.warn('transfer refused', sender=sender, amount=amount, balance=sender_balance)
            return False
        self.balances[sender] = sender_balance - amount
        self.balances[to] = self._balance(to) + amount
        return True

    def _balance(self, account: CallerId) -> int:
        return self.balances.get(account, 0)

    @view
    def balance_of(self, account: CallerId) -> int:
        return self._balance(account)

    @view
    def total_supply(self) -> int:
        return self.supply


class InvalidSupply(NCFail):
    pass
