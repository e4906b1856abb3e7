from structlog.testing import capture_logs

from nanowallet.client import OracleClient, TokenClient, WalletClient
from nanowallet.crypto.util import get_address_b58_from_bytes
from nanowallet.nanocontracts.blueprints.wallet import (
    DepositEvent,
    SetDailyLimitEvent,
    TransferEvent,
    WhitelistAdditionEvent,
)
from nanowallet.nanocontracts.blueprints.wallet.exceptions import AuthorizationError
from nanowallet.nanocontracts.utils import derive_contract_id
from tests.nanocontracts.blueprints.unittest import BlueprintTestCase
from tests.unittest import START_TIMESTAMP


class WalletClientTestCase(BlueprintTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.gen_random_address()
        self.controller = self.gen_random_address()
        self.friend = self.gen_random_address()

        self.oracle = OracleClient.deploy(self.runner, self.owner)
        self.wallet = WalletClient.deploy(
            self.runner,
            self.owner,
            owner=self.owner,
            controllers=[self.controller],
            oracle=self.oracle.contract_id,
            daily_limit=100,
            salt=b'wallet',
        )
        self.runner.credit_address(self.friend, 1000)
        self.wallet.deposit(self.friend, 500)

    def test_deploy(self) -> None:
        self.assertEqual(self.wallet.contract_id, derive_contract_id(b'wallet'))
        self.assertEqual(self.wallet.get_owner(), self.owner)
        self.assertEqual(self.wallet.get_oracle(), self.oracle.contract_id)
        self.assertTrue(self.wallet.is_owner(self.owner))
        self.assertTrue(self.wallet.is_controller(self.controller))
        self.assertFalse(self.wallet.is_controller(self.friend))
        self.assertEqual(self.wallet.get_daily_limit(), 100)
        self.assertEqual(self.wallet.balance(), 500)

    def test_transfer_uses_the_reactor_clock(self) -> None:
        self.wallet.transfer(self.owner, self.friend, 60)
        self.assertEqual(self.wallet.available_limit(), 40)
        self.assertEqual(self.runner.get_balance(self.friend), 560)

        self.clock.advance(self._settings.WALLET_LIMIT_PERIOD + 1)
        self.assertEqual(self.wallet.available_limit(), 100)
        self.assertEqual(self.wallet.available_limit(now=START_TIMESTAMP), 40)

        self.wallet.transfer(self.owner, self.friend, 100)
        self.assertEqual(self.wallet.available_limit(), 0)

    def test_staged_changes(self) -> None:
        self.wallet.add_to_whitelist(self.owner, [self.friend])
        self.assertTrue(self.wallet.is_whitelisted(self.friend))
        self.assertTrue(self.wallet.is_whitelist_initialized())

        self.wallet.remove_from_whitelist(self.owner, [self.friend])
        self.assertEqual(self.wallet.pending_whitelist_removal(), [self.friend])
        self.wallet.remove_from_whitelist_cancel(self.controller)
        self.assertEqual(self.wallet.pending_whitelist_removal(), [])
        self.assertTrue(self.wallet.is_whitelisted(self.friend))

        self.wallet.set_limit(self.owner, 300)
        self.assertEqual(self.wallet.get_daily_limit(), 300)
        self.wallet.set_limit(self.owner, 50)
        self.assertTrue(self.wallet.is_limit_change_submitted())
        self.assertEqual(self.wallet.get_pending_limit(), 50)
        self.wallet.set_limit_confirm(self.controller)
        self.assertEqual(self.wallet.get_daily_limit(), 50)
        self.assertFalse(self.wallet.is_limit_change_submitted())

    def test_failures_are_raised(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.wallet.transfer(self.friend, self.friend, 1)
        with self.assertRaises(AuthorizationError):
            self.wallet.add_controller(self.controller, self.friend)

    def test_transact_logs_the_method(self) -> None:
        with capture_logs() as logs:
            self.wallet.transfer(self.owner, self.friend, 10)
            with self.assertRaises(AuthorizationError):
                self.wallet.set_limit(self.controller, 10)

        transacts = [log for log in logs if log['event'] == 'transact']
        self.assertEqual([log['method'] for log in transacts], ['transfer', 'set_limit'])
        self.assertEqual(transacts[0]['sender'], self.owner.hex())

    def test_iter_events(self) -> None:
        self.wallet.set_limit(self.owner, 200)
        self.wallet.add_to_whitelist(self.owner, [self.friend])
        self.wallet.transfer(self.owner, self.friend, 10)

        events = list(self.wallet.iter_events())
        self.assertEqual([type(event) for event in events], [
            DepositEvent,
            SetDailyLimitEvent,
            WhitelistAdditionEvent,
            TransferEvent,
        ])
        self.assertEqual(events[0].sender, get_address_b58_from_bytes(self.friend))
        self.assertEqual(events[0].amount, 500)
        self.assertEqual(events[2].addresses, [get_address_b58_from_bytes(self.friend)])

        transfers = list(self.wallet.iter_events(TransferEvent))
        self.assertEqual(len(transfers), 1)
        self.assertEqual(transfers[0].amount, 10)

        limits_and_deposits = list(self.wallet.iter_events(SetDailyLimitEvent, DepositEvent))
        self.assertEqual(len(limits_and_deposits), 2)


class TokenClientTestCase(BlueprintTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.holder = self.gen_random_address()
        self.other = self.gen_random_address()
        self.token = TokenClient.deploy(self.runner, self.holder, name='Token', symbol='TKN', supply=1000)
        self.oracle = OracleClient.deploy(self.runner, self.holder)

    def test_token(self) -> None:
        self.assertEqual(self.token.total_supply(), 1000)
        self.assertTrue(self.token.transfer(self.holder, self.other, 400))
        self.assertFalse(self.token.transfer(self.other, self.holder, 401))
        self.assertEqual(self.token.balance_of(self.holder), 600)
        self.assertEqual(self.token.balance_of(self.other), 400)

    def test_oracle(self) -> None:
        self.assertEqual(self.oracle.rate(self.token.contract_id), 0)
        self.oracle.set_rate(self.holder, self.token.contract_id, 3)
        self.assertEqual(self.oracle.rate(self.token.contract_id), 3)
