from nanowallet.nanocontracts.blueprints.wallet import (
    AuthorizationError,
    DepositEvent,
    ExternalCallFailureError,
    InsufficientBudgetError,
    InvalidArgumentError,
    TransferEvent,
)
from nanowallet.nanocontracts.exception import NCForbiddenAction, NCInsufficientFunds, NCUninitializedContractError
from nanowallet.nanocontracts.types import NCDepositAction, NCWithdrawalAction, TokenUid
from tests.nanocontracts.blueprints.unittest import WalletTestCase


class WalletDepositTestCase(WalletTestCase):
    def test_deposit(self) -> None:
        self.deposit(300, sender=self.stranger)
        self.deposit(200, sender=self.owner)

        self.assertEqual(self.runner.get_balance(self.wallet_id), 500)
        self.assertEqual(self.view('balance', self.native_token_uid), 500)
        self.assertEqual(self.runner.get_balance(self.stranger), 0)
        self.assertEqual(self.get_events(), [
            DepositEvent(sender=self.stranger, amount=300),
            DepositEvent(sender=self.owner, amount=200),
        ])

    def test_deposit_without_value(self) -> None:
        self.call(self.stranger, 'deposit')
        self.assertEqual(self.runner.get_balance(self.wallet_id), 0)
        self.assertEqual(self.get_events(), [])

    def test_deposit_more_than_available(self) -> None:
        self.runner.credit_address(self.stranger, 10)
        with self.assertRaises(NCInsufficientFunds):
            self.call(self.stranger, 'deposit', actions=[
                NCDepositAction(token_uid=self.native_token_uid, amount=11),
            ])
        self.assertEqual(self.runner.get_balance(self.stranger), 10)
        self.assertEqual(self.runner.get_balance(self.wallet_id), 0)
        self.assertEqual(self.get_events(), [])

    def test_deposit_of_other_asset(self) -> None:
        other_asset = TokenUid(self.gen_random_contract_id())
        self.runner.credit_address(self.stranger, 10, other_asset)
        with self.assertRaises(InvalidArgumentError):
            self.call(self.stranger, 'deposit', actions=[NCDepositAction(token_uid=other_asset, amount=10)])
        self.assertEqual(self.runner.get_balance(self.stranger, other_asset), 10)

    def test_withdrawal_is_forbidden(self) -> None:
        self.deposit(100)
        with self.assertRaises(NCForbiddenAction):
            self.call(self.owner, 'deposit', actions=[
                NCWithdrawalAction(token_uid=self.native_token_uid, amount=100),
            ])
        self.assertEqual(self.runner.get_balance(self.wallet_id), 100)


class WalletNativeTransferTestCase(WalletTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.deposit(1000)

    def test_transfer(self) -> None:
        self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 70)

        self.assertEqual(self.runner.get_balance(self.friend), 70)
        self.assertEqual(self.runner.get_balance(self.wallet_id), 930)
        self.assertEqual(self.available(), 30)
        self.assertEqual(self.get_events()[-1], TransferEvent(to=self.friend, asset=self.native_token_uid, amount=70))

    def test_transfer_to_whitelisted_is_not_limited(self) -> None:
        self.call(self.owner, 'add_to_whitelist', [self.friend])
        self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 800)

        self.assertEqual(self.runner.get_balance(self.friend), 800)
        self.assertEqual(self.available(), self.DAILY_LIMIT)

    def test_transfer_only_by_owner(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.call(self.controller_a, 'transfer', self.friend, self.native_token_uid, 10)
        with self.assertRaises(AuthorizationError):
            self.call(self.stranger, 'transfer', self.stranger, self.native_token_uid, 10)
        self.assertEqual(self.runner.get_balance(self.wallet_id), 1000)

    def test_transfer_invalid_arguments(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 0)
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'transfer', self.friend, self.native_token_uid, -5)
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'transfer', b'\x01', self.native_token_uid, 5)
        self.assertEqual(self.available(), self.DAILY_LIMIT)

    def test_transfer_more_than_balance(self) -> None:
        self.call(self.owner, 'add_to_whitelist', [self.friend])
        with self.assertRaises(ExternalCallFailureError):
            self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 1001)
        self.assertEqual(self.runner.get_balance(self.wallet_id), 1000)

    def test_failed_send_does_not_charge_the_limit(self) -> None:
        self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 50)
        self.assertEqual(self.available(), 50)

        # Drain the wallet to a whitelisted address, then try to spend what is left of the budget.
        self.call(self.owner, 'add_to_whitelist', [self.owner])
        self.call(self.owner, 'transfer', self.owner, self.native_token_uid, 940)
        with self.assertRaises(ExternalCallFailureError):
            self.call(self.owner, 'transfer', self.friend, self.native_token_uid, 20)
        self.assertEqual(self.available(), 50)


class WalletTokenTransferTestCase(WalletTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.token_id = self.deploy_token(self.owner, 1_000)
        self.token_uid = TokenUid(self.token_id)
        self.assertTrue(self.send_token(self.token_id, self.owner, self.wallet_id, 500))
        self.set_rate(self.token_id, 2)

    def test_token_balance(self) -> None:
        self.assertEqual(self.view('balance', self.token_uid), 500)
        self.assertEqual(self.token_balance(self.token_id, self.owner), 500)

    def test_transfer_charges_the_native_value(self) -> None:
        self.call(self.owner, 'transfer', self.friend, self.token_uid, 30)

        self.assertEqual(self.token_balance(self.token_id, self.friend), 30)
        self.assertEqual(self.token_balance(self.token_id, self.wallet_id), 470)
        self.assertEqual(self.available(), self.DAILY_LIMIT - 60)
        self.assertEqual(self.get_events()[-1], TransferEvent(to=self.friend, asset=self.token_uid, amount=30))

    def test_transfer_over_limit_in_native_value(self) -> None:
        with self.assertRaises(InsufficientBudgetError):
            self.call(self.owner, 'transfer', self.friend, self.token_uid, 51)
        self.assertEqual(self.token_balance(self.token_id, self.friend), 0)
        self.assertEqual(self.available(), self.DAILY_LIMIT)

    def test_transfer_without_rate(self) -> None:
        self.set_rate(self.token_id, 0)
        with self.assertRaises(InvalidArgumentError):
            self.call(self.owner, 'transfer', self.friend, self.token_uid, 1)
        self.assertEqual(self.token_balance(self.token_id, self.friend), 0)

    def test_transfer_to_whitelisted_skips_the_oracle(self) -> None:
        self.set_rate(self.token_id, 0)
        self.call(self.owner, 'add_to_whitelist', [self.friend])
        self.call(self.owner, 'transfer', self.friend, self.token_uid, 400)

        self.assertEqual(self.token_balance(self.token_id, self.friend), 400)
        self.assertEqual(self.available(), self.DAILY_LIMIT)

    def test_refused_token_transfer(self) -> None:
        self.call(self.owner, 'add_to_whitelist', [self.friend])
        with self.assertRaises(ExternalCallFailureError):
            self.call(self.owner, 'transfer', self.friend, self.token_uid, 501)
        self.assertEqual(self.token_balance(self.token_id, self.wallet_id), 500)

    def test_refused_token_transfer_does_not_charge_the_limit(self) -> None:
        # Move most tokens out without spending the budget, so the next transfer fits the budget but not the balance.
        self.call(self.owner, 'add_to_whitelist', [self.owner])
        self.call(self.owner, 'transfer', self.owner, self.token_uid, 480)
        with self.assertRaises(ExternalCallFailureError):
            self.call(self.owner, 'transfer', self.friend, self.token_uid, 30)
        self.assertEqual(self.available(), self.DAILY_LIMIT)
        self.assertEqual(self.token_balance(self.token_id, self.wallet_id), 20)

    def test_transfer_of_unknown_token(self) -> None:
        unknown = TokenUid(self.gen_random_contract_id())
        self.call(self.owner, 'add_to_whitelist', [self.friend])
        with self.assertRaises(NCUninitializedContractError):
            self.call(self.owner, 'transfer', self.friend, unknown, 1)
