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

from nanowallet.nanocontracts.blueprints.wallet.events import SetDailyLimitEvent
from nanowallet.nanocontracts.blueprints.wallet.exceptions import InsufficientBudgetError, InvalidArgumentError
from nanowallet.nanocontracts.blueprints.wallet.pending import PendingAmount
from nanowallet.nanocontracts.component import Component
from nanowallet.nanocontracts.types import MAX_AMOUNT


class DailyLimitAccount(Component):
    """Budget for transfers to non-whitelisted addresses, replenished every period.

    The period is `WALLET_LIMIT_PERIOD` seconds (a day by default) and starts at `period_start`. A timestamp belongs to
    the next period only once it is strictly after `period_start + period`. When periods are skipped, `period_start`
    jumps forward by a whole number of periods so it stays aligned with the first one.

    A new limit is applied right away the first time it is set, and needs a confirmation afterwards. Applying a new
    limit does not change what is left of the current period.
    """

    limit: int
    period_start: int
    remaining_today: int
    limit_initialized: bool
    pending: PendingAmount

    def setup(self, now: int, limit: int) -> None:
        self._check_amount(limit)
        self.limit = limit
        self.period_start = now
        self.remaining_today = limit
        self.limit_initialized = False
        self.pending.setup()

    @staticmethod
    def _check_amount(amount: int) -> None:
        if not 0 <= amount <= MAX_AMOUNT:
            raise InvalidArgumentError(f'invalid limit: {amount}')

    def _period(self) -> int:
        return self.syscall.get_settings().WALLET_LIMIT_PERIOD

    def _is_rollover_due(self, now: int) -> bool:
        return now > self.period_start + self._period()

    def set_limit(self, amount: int) -> None:
        """Apply the limit right away the first time, otherwise submit it for confirmation."""
        self._check_amount(amount)
        if not self.limit_initialized:
            self._apply_limit(amount)
            self.limit_initialized = True
            return
        self.pending.submit(amount)
        self.log.info('daily limit submitted', amount=amount)

    def confirm_limit(self) -> None:
        self._apply_limit(self.pending.take())

    def cancel_limit(self) -> None:
        self.pending.cancel()

    def _apply_limit(self, amount: int) -> None:
        self.limit = amount
        self.log.info('daily limit applied', amount=amount)
        self.syscall.emit_event(SetDailyLimitEvent(amount=amount).json_dumpb())

    def rollover_if_needed(self, now: int) -> None:
        if not self._is_rollover_due(now):
            return
        period = self._period()
        elapsed_periods = (now - self.period_start) // period
        self.period_start += elapsed_periods * period
        self.remaining_today = self.limit

    def available(self, now: int) -> int:
        """Return what could be spent at `now`, without changing anything."""
        if self._is_rollover_due(now):
            return self.limit
        return self.remaining_today

    def charge(self, now: int, amount: int) -> None:
        """Spend `amount` from the budget. It fails, changing nothing, when the budget is not enough."""
        self.rollover_if_needed(now)
        if amount > self.remaining_today:
            raise InsufficientBudgetError(f'daily limit exceeded: {amount} > {self.remaining_today}')
        self.remaining_today -= amount
