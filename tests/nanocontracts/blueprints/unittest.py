import os
from typing import Any, Sequence

from nanowallet.conf.settings import NATIVE_TOKEN_UID
from nanowallet.nanocontracts import Context
from nanowallet.nanocontracts.blueprint import Blueprint
from nanowallet.nanocontracts.blueprint_env import BlueprintEnvironment
from nanowallet.nanocontracts.blueprints.wallet.events import WalletEvent, parse_event
from nanowallet.nanocontracts.catalog import generate_catalog
from nanowallet.nanocontracts.nc_exec_logs import NCLogger
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.storage import NCMemoryStorageFactory
from nanowallet.nanocontracts.types import Address, BlueprintId, ContractId, NCAction, NCDepositAction, TokenUid
from nanowallet.nanocontracts.utils import derive_blueprint_id
from nanowallet.pubsub import PubSubManager
from tests import unittest


class BlueprintTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.nc_catalog = generate_catalog()
        self.storage_factory = NCMemoryStorageFactory()
        self.pubsub = PubSubManager()
        self.runner = self.build_runner()
        self.native_token_uid = TokenUid(NATIVE_TOKEN_UID)

    def build_runner(self) -> Runner:
        """Create a Runner instance."""
        return Runner(
            self.nc_catalog,
            self.storage_factory,
            reactor=self.clock,
            settings=self._settings,
            pubsub=self.pubsub,
        )

    def get_readonly_contract(self, contract_id: ContractId) -> Blueprint:
        """Return an instance of a contract bound to its committed storage, to read fields directly in tests.

        The committed storage is always locked, so any write through the returned instance fails.
        """
        storage = self.runner.get_storage(contract_id)
        env = BlueprintEnvironment(self.runner, NCLogger(__reactor__=self.clock), storage)
        blueprint_class = self.nc_catalog.get_blueprint_class(self.runner.get_blueprint_id(contract_id))
        return blueprint_class(env)

    def register_blueprint_class(self, blueprint_class: type[Blueprint]) -> BlueprintId:
        """Register a blueprint class under a random id, allowing contracts to be created from it."""
        blueprint_id = self.gen_random_blueprint_id()
        assert blueprint_id not in self.nc_catalog.blueprints
        self.nc_catalog.blueprints[blueprint_id] = blueprint_class
        return blueprint_id

    def gen_random_blueprint_id(self) -> BlueprintId:
        return BlueprintId(os.urandom(32))

    def create_context(
        self,
        actions: Sequence[NCAction] | None = None,
        caller_id: Address | None = None,
        timestamp: int | None = None,
    ) -> Context:
        """Create a Context instance with optional values or defaults."""
        return Context(
            caller_id=caller_id or self.gen_random_address(),
            timestamp=timestamp if timestamp is not None else self.now,
            actions=actions or (),
        )


class WalletTestCase(BlueprintTestCase):
    """Deploys a price oracle and a wallet with one owner and two controllers."""

    DAILY_LIMIT: int = 100

    def setUp(self) -> None:
        super().setUp()
        self.owner = self.gen_random_address()
        self.controller_a = self.gen_random_address()
        self.controller_b = self.gen_random_address()
        self.stranger = self.gen_random_address()
        self.friend = self.gen_random_address()

        self.oracle_id = self.gen_random_contract_id()
        self.runner.create_contract(
            self.oracle_id,
            derive_blueprint_id('PriceOracle'),
            self.create_context(caller_id=self.owner),
        )

        self.wallet_id = self.deploy_wallet()
        self.start = self.now

    def deploy_wallet(self) -> ContractId:
        """Create another wallet with the same owner, controllers, oracle and limit."""
        wallet_id = self.gen_random_contract_id()
        self.runner.create_contract(
            wallet_id,
            derive_blueprint_id('Wallet'),
            self.create_context(caller_id=self.owner),
            self.owner,
            [self.controller_a, self.controller_b],
            self.oracle_id,
            self.DAILY_LIMIT,
        )
        return wallet_id

    def call(self, caller: Address, method_name: str, *args: Any, actions: Sequence[NCAction] = ()) -> Any:
        """Call a public method of the wallet."""
        ctx = self.create_context(actions=actions, caller_id=caller)
        return self.runner.call_public_method(self.wallet_id, method_name, ctx, *args)

    def view(self, method_name: str, *args: Any) -> Any:
        return self.runner.call_view_method(self.wallet_id, method_name, *args)

    def deposit(self, amount: int, sender: Address | None = None) -> None:
        """Credit `sender` with native currency and deposit it all into the wallet."""
        sender = sender or self.stranger
        self.runner.credit_address(sender, amount)
        self.call(sender, 'deposit', actions=[NCDepositAction(token_uid=self.native_token_uid, amount=amount)])

    def deploy_token(self, holder: Address, supply: int) -> ContractId:
        token_id = self.gen_random_contract_id()
        self.runner.create_contract(
            token_id,
            derive_blueprint_id('FungibleToken'),
            self.create_context(caller_id=holder),
            'Test Token',
            'TST',
            supply,
        )
        return token_id

    def send_token(self, token_id: ContractId, sender: Address, to: bytes, amount: int) -> bool:
        ctx = self.create_context(caller_id=sender)
        return self.runner.call_public_method(token_id, 'transfer', ctx, to, amount)

    def token_balance(self, token_id: ContractId, account: bytes) -> int:
        return self.runner.call_view_method(token_id, 'balance_of', account)

    def set_rate(self, token_id: ContractId, rate: int) -> None:
        ctx = self.create_context(caller_id=self.owner)
        self.runner.call_public_method(self.oracle_id, 'set_rate', ctx, TokenUid(token_id), rate)

    def available(self) -> int:
        return self.view('available_limit', self.now)

    def get_events(self) -> list[WalletEvent]:
        """Return the decoded events emitted by the wallet so far."""
        return [parse_event(event.data) for event in self.runner.get_events(self.wallet_id)]
