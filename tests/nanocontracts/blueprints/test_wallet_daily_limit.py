from nanowallet.nanocontracts.blueprints.wallet import (
    AuthorizationError,
    InsufficientBudgetError,
    InvalidArgumentError,
    ProtocolStateError,
    SetDailyLimitEvent,
    Wallet,
)
from nanowallet.nanocontracts.types import MAX_AMOUNT
from tests.nanocontracts.blueprints.unittest import WalletTestCase


class WalletDailyLimitTestCase(WalletTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.period = self._settings.WALLET_LIMIT_PERIOD
        self.deposit(1000)

    def _spend(self, amount: int) -> None:
        self.call(self.owner, 'transfer', self.friend, self.native_token_uid, amount)

    def _period_start(self) -> int:
        wallet = self.get_readonly_contract(self.wallet_id)
        assert isinstance(wallet, Wallet)
        return wallet.daily_limit.period_start

    def test_spend_within_limit(self) -> None:
        self._spend(60)
        self.assertEqual(self.available(), 40)
        self._spend(40)
        self.assertEqual(self.available(), 0)
        self.assertEqual(self.runner.get_balance(self.friend), 100)

    def test_spend_over_limit(self) -> None:
        self._spend(60)
        with self.assertRaises(InsufficientBudgetError):
            self._spend(41)

        # Nothing changed.
        self.assertEqual(self.available(), 40)
        self.assertEqual(self.runner.get_balance(self.friend), 60)
        self.assertEqual(self.runner.get_balance(self.wallet_id), 940)

    def test_rollover_is_strictly_after_a_full_period(self) -> None:
        self._spend(100)

        self.clock.advance(self.period)
        self.assertEqual(self.available(), 0)
        with self.assertRaises(InsufficientBudgetError):
            self._spend(1)

        self.clock.advance(1)
        self.assertEqual(self.available(), self.DAILY_LIMIT)
        self._spend(100)
        self.assertEqual(self.available(), 0)
        self.assertEqual(self._period_start(), self.start + self.period)

    def test_rollover_keeps_period_alignment(self) -> None:
        self._spend(100)

        self.clock.advance(3 * self.period + 10)
        self._spend(30)
        self.assertEqual(self._period_start(), self.start + 3 * self.period)
        self.assertEqual(self.available(), 70)

        # Exactly one period after the new start is still the same period.
        self.clock.advance(self.period - 10)
        self.assertEqual(self.available(), 70)
        self.clock.advance(1)
        self.assertEqual(self.available(), 100)

    def test_available_limit_does_not_roll_over(self) -> None:
        self._spend(100)
        self.assertEqual(self.view('available_limit', self.now + 2 * self.period), 100)

        # The view changed nothing.
        self.assertEqual(self._period_start(), self.start)
        self.assertEqual(self.available(), 0)

    def test_available_limit_a_day_and_two_days_later(self) -> None:
        self._spend(self.DAILY_LIMIT)
        hour = 3600
        self.assertEqual(self.period, 24 * hour)
        self.assertEqual(self.view('available_limit', self.start + 25 * hour), self.DAILY_LIMIT)
        self.assertEqual(self.view('available_limit', self.start + 48 * hour + 1), self.DAILY_LIMIT)

    def test_first_set_limit_applies_immediately(self) -> None:
        self._spend(60)
        self.call(self.owner, 'set_limit', 500)

        self.assertEqual(self.view('get_daily_limit'), 500)
        self.assertFalse(self.view('is_limit_change_submitted'))
        # What is left of the current period is unchanged.
        self.assertEqual(self.available(), 40)
        self.assertIn(SetDailyLimitEvent(amount=500), self.get_events())

        self.clock.advance(self.period + 1)
        self.assertEqual(self.available(), 500)

    def test_limit_change_is_staged_after_bootstrap(self) -> None:
        self.call(self.owner, 'set_limit', 200)
        self.call(self.owner, 'set_limit', 300)

        self.assertEqual(self.view('get_daily_limit'), 200)
        self.assertTrue(self.view('is_limit_change_submitted'))
        self.assertEqual(self.view('get_pending_limit'), 300)

        self.call(self.controller_a, 'set_limit_confirm')

        self.assertEqual(self.view('get_daily_limit'), 300)
        self.assertFalse(self.view('is_limit_change_submitted'))
        self.assertEqual(self.view('get_pending_limit'), 0)
        limit_events = [event for event in self.get_events() if isinstance(event, SetDailyLimitEvent)]
        self.assertEqual(limit_events, [SetDailyLimitEvent(amount=200), SetDailyLimitEvent(amount=300)])

    def test_limit_confirm_does_not_refill_the_period(self) -> None:
        self.call(self.owner, 'set_limit', 100)
        self._spend(100)
        self.call(self.owner, 'set_limit', 1000)
        self.call(self.controller_b, 'set_limit_confirm')
        self.assertEqual(self.available(), 0)

    def test_second_limit_submission_is_rejected(self) -> None:
        self.call(self.owner, 'set_limit', 200)
        self.call(self.owner, 'set_limit', 300)
        with self.assertRaises(ProtocolStateError):
            self.call(self.owner, 'set_limit', 400)
        self.assertEqual(self.view('get_pending_limit'), 300)

    def test_cancel_limit(self) -> None:
        self.call(self.owner, 'set_limit', 200)
        self.call(self.owner, 'set_limit', 300)
        self.call(self.controller_a, 'set_limit_cancel')

        self.assertFalse(self.view('is_limit_change_submitted'))
        with self.assertRaises(ProtocolStateError):
            self.call(self.controller_a, 'set_limit_confirm')
        self.assertEqual(self.view('get_daily_limit'), 200)

        # Cancelling again is allowed.
        self.call(self.controller_a, 'set_limit_cancel')

    def test_cancel_then_resubmit_matches_a_direct_confirm(self) -> None:
        def limit_state() -> tuple[int, bool, int, int]:
            return (
                self.view('get_daily_limit'),
                self.view('is_limit_change_submitted'),
                self.view('get_pending_limit'),
                self.available(),
            )

        self.call(self.owner, 'set_limit', 200)
        self.call(self.owner, 'set_limit', 300)
        self.call(self.controller_a, 'set_limit_confirm')
        direct = limit_state()

        self.wallet_id = self.deploy_wallet()
        self.call(self.owner, 'set_limit', 200)
        self.call(self.owner, 'set_limit', 300)
        self.call(self.controller_b, 'set_limit_cancel')
        self.call(self.owner, 'set_limit', 300)
        self.call(self.controller_a, 'set_limit_confirm')

        self.assertEqual(limit_state(), direct)
        self.assertEqual(direct[:3], (300, False, 0))

    def test_confirm_without_submission(self) -> None:
        with self.assertRaises(ProtocolStateError):
            self.call(self.controller_a, 'set_limit_confirm')

    def test_limit_roles(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.call(self.controller_a, 'set_limit', 10)
        self.call(self.owner, 'set_limit', 10)
        self.call(self.owner, 'set_limit', 20)
        with self.assertRaises(AuthorizationError):
            self.call(self.owner, 'set_limit_confirm')
        with self.assertRaises(AuthorizationError):
            self.call(self.stranger, 'set_limit_cancel')
        self.assertEqual(self.view('get_daily_limit'), 10)

    def test_invalid_limit(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'set_limit', -1)
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'set_limit', MAX_AMOUNT + 1)
        self.assertEqual(self.view('get_daily_limit'), self.DAILY_LIMIT)

    def test_zero_limit_blocks_non_whitelisted_transfers(self) -> None:
        self.call(self.owner, 'set_limit', 0)
        self.clock.advance(self.period + 1)
        with self.assertRaises(InsufficientBudgetError):
            self._spend(1)

        self.call(self.owner, 'add_to_whitelist', [self.friend])
        self._spend(1)
        self.assertEqual(self.runner.get_balance(self.friend), 1)
