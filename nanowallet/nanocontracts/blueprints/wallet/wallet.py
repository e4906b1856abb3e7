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

from nanowallet.conf.settings import NATIVE_TOKEN_UID
from nanowallet.nanocontracts.blueprint import Blueprint
from nanowallet.nanocontracts.blueprints.wallet.access import AccessRegistry
from nanowallet.nanocontracts.blueprints.wallet.daily_limit import DailyLimitAccount
from nanowallet.nanocontracts.blueprints.wallet.events import DepositEvent, TopUpGasEvent, TransferEvent
from nanowallet.nanocontracts.blueprints.wallet.exceptions import ExternalCallFailureError, InvalidArgumentError
from nanowallet.nanocontracts.blueprints.wallet.utils import check_address
from nanowallet.nanocontracts.blueprints.wallet.whitelist import Whitelist
from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.types import MAX_AMOUNT, Address, ContractId, TokenUid, public, view


class Wallet(Blueprint):
    """A wallet guarded by an owner and a set of controllers.

    The owner spends and proposes changes to the whitelist and the daily limit, the controllers confirm or cancel
    them. Transfers to whitelisted addresses are not limited, any other transfer is paid from the daily limit, valued
    in native currency through the price oracle when a token is sent.

    The asset of a transfer is either `NATIVE_TOKEN_UID` or the id of a fungible token contract.
    """

    access: AccessRegistry
    whitelist: Whitelist
    daily_limit: DailyLimitAccount

    # Contract that gives the value of a token in native currency.
    oracle: ContractId

    @public
    def initialize(
        self,
        ctx: Context,
        owner: Address,
        controllers: list[Address],
        oracle: ContractId,
        daily_limit: int,
    ) -> None:
        """Initialize the contract."""
        check_address(owner)
        check_address(oracle)
        for controller in controllers:
            check_address(controller)

        self.access.setup(owner, controllers)
        self.whitelist.setup()
        self.daily_limit.setup(ctx.timestamp, daily_limit)
        self.oracle = oracle

    @public(allow_deposit=True)
    def deposit(self, ctx: Context) -> None:
        """Receive native currency. Any caller may deposit."""
        amount = 0
        for action in ctx.actions_list:
            if action.token_uid != NATIVE_TOKEN_UID:
                raise InvalidArgumentError('only the native currency can be deposited')
            amount += action.amount
        if amount > 0:
            self.syscall.emit_event(DepositEvent(sender=ctx.caller_id, amount=amount).json_dumpb())

    @public
    def add_controller(self, ctx: Context, controller: Address) -> None:
        check_address(controller)
        self.access.add_controller(ctx.caller_id, controller)

    @public
    def remove_controller(self, ctx: Context, controller: Address) -> None:
        self.access.remove_controller(ctx.caller_id, controller)

    @public
    def add_to_whitelist(self, ctx: Context, addresses: list[Address]) -> None:
        self.access.require_owner(ctx.caller_id)
        self.whitelist.add(addresses)

    @public
    def add_to_whitelist_confirm(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.whitelist.confirm_addition()

    @public
    def add_to_whitelist_cancel(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.whitelist.cancel_addition()

    @public
    def remove_from_whitelist(self, ctx: Context, addresses: list[Address]) -> None:
        self.access.require_owner(ctx.caller_id)
        self.whitelist.remove(addresses)

    @public
    def remove_from_whitelist_confirm(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.whitelist.confirm_removal()

    @public
    def remove_from_whitelist_cancel(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.whitelist.cancel_removal()

    @public
    def set_limit(self, ctx: Context, amount: int) -> None:
        self.access.require_owner(ctx.caller_id)
        self.daily_limit.set_limit(amount)

    @public
    def set_limit_confirm(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.daily_limit.confirm_limit()

    @public
    def set_limit_cancel(self, ctx: Context) -> None:
        self.access.require_controller(ctx.caller_id)
        self.daily_limit.cancel_limit()

    @public
    def transfer(self, ctx: Context, to: Address, asset: TokenUid, amount: int) -> None:
        """Send `amount` of `asset` to `to`, charging the daily limit unless `to` is whitelisted."""
        self.access.require_owner(ctx.caller_id)
        check_address(to)
        if amount <= 0:
            raise InvalidArgumentError(f'amount must be positive: {amount}')

        is_native = asset == NATIVE_TOKEN_UID
        if not self.whitelist.contains(to):
            value = amount if is_native else self._get_native_value(asset, amount)
            self.daily_limit.charge(ctx.timestamp, value)

        if is_native:
            self._send_native(to, amount)
        else:
            success = self.syscall.call_public_method(ContractId(asset), 'transfer', [], to, amount)
            if success is not True:
                raise ExternalCallFailureError(f'token transfer failed: {asset.hex()}')

        self.log.info('transfer', to=to, asset=asset, amount=amount)
        self.syscall.emit_event(TransferEvent(to=to, asset=asset, amount=amount).json_dumpb())

    def _get_native_value(self, asset: TokenUid, amount: int) -> int:
        rate = self.syscall.call_view_method(self.oracle, 'rate', asset)
        value = rate * amount
        if value == 0:
            raise InvalidArgumentError(f'no rate for token {asset.hex()}')
        return value

    def _send_native(self, to: Address, amount: int) -> None:
        balance = self.syscall.get_current_balance()
        if balance < amount:
            raise ExternalCallFailureError(f'native send failed: balance {balance} < {amount}')
        self.syscall.transfer_to_address(to, amount, TokenUid(NATIVE_TOKEN_UID))

    @public
    def top_up_gas(self, ctx: Context, amount: int) -> None:
        """Send native currency to the owner so it can pay for its operations, never beyond the top-up ceiling."""
        self.access.require_owner_or_controller(ctx.caller_id)
        if amount <= 0:
            raise InvalidArgumentError(f'amount must be positive: {amount}')

        ceiling = self.syscall.get_settings().WALLET_TOP_UP_GAS_CEILING
        owner = self.access.owner
        owner_balance = self.syscall.get_address_balance(owner)
        if owner_balance >= ceiling:
            raise InvalidArgumentError(f'owner balance is already at the ceiling: {owner_balance} >= {ceiling}')
        if owner_balance + amount > MAX_AMOUNT:
            raise InvalidArgumentError('amount overflows the owner balance')

        amount = min(amount, ceiling - owner_balance)
        self._send_native(owner, amount)
        self.syscall.emit_event(TopUpGasEvent(initiator=ctx.caller_id, owner=owner, amount=amount).json_dumpb())

    @view
    def is_owner(self, address: Address) -> bool:
        return self.access.is_owner(address)

    @view
    def is_controller(self, address: Address) -> bool:
        return self.access.is_controller(address)

    @view
    def get_owner(self) -> Address:
        return self.access.owner

    @view
    def get_oracle(self) -> ContractId:
        return self.oracle

    @view
    def is_whitelisted(self, address: Address) -> bool:
        return self.whitelist.contains(address)

    @view
    def is_whitelist_initialized(self) -> bool:
        return self.whitelist.initialized

    @view
    def pending_whitelist_addition(self) -> list[Address]:
        return self.whitelist.addition.peek()

    @view
    def pending_whitelist_removal(self) -> list[Address]:
        return self.whitelist.removal.peek()

    @view
    def get_daily_limit(self) -> int:
        return self.daily_limit.limit

    @view
    def get_pending_limit(self) -> int:
        return self.daily_limit.pending.peek()

    @view
    def is_limit_change_submitted(self) -> bool:
        return self.daily_limit.pending.is_submitted()

    @view
    def available_limit(self, now: int) -> int:
        """Return what could be sent to non-whitelisted addresses at `now`."""
        return self.daily_limit.available(now)

    @view
    def balance(self, asset: TokenUid) -> int:
        """Return the balance of the wallet in native currency or in a token."""
        if asset == NATIVE_TOKEN_UID:
            return self.syscall.get_current_balance()
        return self.syscall.call_view_method(ContractId(asset), 'balance_of', self.syscall.get_contract_id())
