from nanowallet.nanocontracts.blueprints.oracle import InvalidRate, Unauthorized
from nanowallet.nanocontracts.blueprints.token import InvalidSupply
from nanowallet.nanocontracts.types import TokenUid
from nanowallet.nanocontracts.utils import derive_blueprint_id
from tests.nanocontracts.blueprints.unittest import BlueprintTestCase


class FungibleTokenTestCase(BlueprintTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.holder = self.gen_random_address()
        self.receiver = self.gen_random_address()
        self.token_id = self.gen_random_contract_id()
        self.runner.create_contract(
            self.token_id,
            derive_blueprint_id('FungibleToken'),
            self.create_context(caller_id=self.holder),
            'Test Token',
            'TST',
            1_000,
        )

    def _transfer(self, sender: bytes, to: bytes, amount: int) -> bool:
        ctx = self.create_context(caller_id=sender)
        return self.runner.call_public_method(self.token_id, 'transfer', ctx, to, amount)

    def _balance_of(self, account: bytes) -> int:
        return self.runner.call_view_method(self.token_id, 'balance_of', account)

    def test_supply_goes_to_creator(self) -> None:
        self.assertEqual(self.runner.call_view_method(self.token_id, 'total_supply'), 1_000)
        self.assertEqual(self._balance_of(self.holder), 1_000)
        self.assertEqual(self._balance_of(self.receiver), 0)

    def test_transfer(self) -> None:
        self.assertTrue(self._transfer(self.holder, self.receiver, 300))
        self.assertEqual(self._balance_of(self.holder), 700)
        self.assertEqual(self._balance_of(self.receiver), 300)

    def test_refused_transfers(self) -> None:
        self.assertFalse(self._transfer(self.holder, self.receiver, 1_001))
        self.assertFalse(self._transfer(self.holder, self.receiver, 0))
        self.assertFalse(self._transfer(self.receiver, self.holder, 1))
        self.assertEqual(self._balance_of(self.holder), 1_000)

    def test_negative_supply(self) -> None:
        with self.assertRaises(InvalidSupply):
            self.runner.create_contract(
                self.gen_random_contract_id(),
                derive_blueprint_id('FungibleToken'),
                self.create_context(),
                'Bad',
                'BAD',
                -1,
            )


class PriceOracleTestCase(BlueprintTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.gen_random_address()
        self.oracle_id = self.gen_random_contract_id()
        self.token_uid = TokenUid(self.gen_random_contract_id())
        self.runner.create_contract(
            self.oracle_id,
            derive_blueprint_id('PriceOracle'),
            self.create_context(caller_id=self.owner),
        )

    def _set_rate(self, caller: bytes, rate: int) -> None:
        ctx = self.create_context(caller_id=caller)
        self.runner.call_public_method(self.oracle_id, 'set_rate', ctx, self.token_uid, rate)

    def test_unknown_token_is_worth_nothing(self) -> None:
        self.assertEqual(self.runner.call_view_method(self.oracle_id, 'rate', self.token_uid), 0)

    def test_set_rate(self) -> None:
        self._set_rate(self.owner, 7)
        self.assertEqual(self.runner.call_view_method(self.oracle_id, 'rate', self.token_uid), 7)
        self._set_rate(self.owner, 3)
        self.assertEqual(self.runner.call_view_method(self.oracle_id, 'rate', self.token_uid), 3)

    def test_set_rate_errors(self) -> None:
        with self.assertRaises(Unauthorized):
            self._set_rate(self.gen_random_address(), 7)
        with self.assertRaises(InvalidRate):
            self._set_rate(self.owner, -1)
        self.assertEqual(self.runner.call_view_method(self.oracle_id, 'rate', self.token_uid), 0)
