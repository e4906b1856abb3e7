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
from nanowallet.nanocontracts.types import Address, TokenUid, public, view


class PriceOracle(Blueprint):
    """Value of tokens in native currency, set by the owner of the oracle.

    The rate of a token is how many units of native currency one unit of the token is worth. Tokens without a rate are
    worth zero, which callers must treat as an error.
    """

    owner: Address
    rates: dict[bytes, int]

    @public
    def initialize(self, ctx: Context) -> None:
        """Initialize the contract."""
        self.owner = ctx.caller_id
        self.rates = {}

    @public
    def set_rate(self, ctx: Context, token: TokenUid, rate: int) -> None:
        if ctx.caller_id != self.owner:
            raise Unauthorized('only the owner can set rates')
        if rate < 0:
            raise InvalidRate(f'rate cannot be negative: {rate}')
        self.rates[token] = rate

    @view
    def rate(self, token: TokenUid) -> int:
        return self.rates.get(token, 0)


class Unauthorized(NCFail):
    pass


class InvalidRate(NCFail):
    pass
