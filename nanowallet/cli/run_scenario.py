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

"""Replay a wallet scenario described in a YAML file against an in-memory runner.

A scenario names its accounts, seeds their native balances, deploys a price oracle, any number of fungible tokens
and one wallet, then replays a list of steps. Example:

    start_time: 1700000000
    accounts: [owner, alice, bob, friend]
    balances:
      owner: 1000
    tokens:
      - {symbol: USDT, name: Tether, supply: 1000000, holder: owner}
    rates:
      USDT: 2
    wallet:
      owner: owner
      controllers: [alice, bob]
      daily_limit: 100
    steps:
      - {sender: owner, method: deposit, args: [500]}
      - {sender: owner, method: transfer, args: [friend, 50]}
      - {advance: 86400}
      - {sender: owner, method: transfer, args: [friend, 500], expect_failure: InsufficientBudgetError}

Arguments that name an account, a token symbol, `wallet`, `oracle` or `native` are replaced by the matching address
or contract id. A step without `sender` calls a view method. A step runs on the wallet unless `target` names a token
symbol or `oracle`.

Every event emitted by the wallet is printed to stdout as a JSON line, as soon as its execution is committed.
"""

import sys
from argparse import ArgumentParser, Namespace
from typing import Any, Optional

from pydantic import model_validator
from structlog import get_logger
from twisted.internet.task import Clock

from nanowallet.client import ContractClient, OracleClient, TokenClient, WalletClient
from nanowallet.conf.settings import NATIVE_TOKEN_UID, WalletSettings
from nanowallet.crypto.util import get_address_from_seed
from nanowallet.exception import ScenarioError
from nanowallet.nanocontracts.blueprints.wallet.events import parse_event
from nanowallet.nanocontracts.catalog import generate_catalog
from nanowallet.nanocontracts.exception import NCTransactionFail
from nanowallet.nanocontracts.nc_exec_logs import NCEvent
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.storage import NCMemoryStorageFactory
from nanowallet.nanocontracts.types import Address
from nanowallet.pubsub import EventArguments, NanoWalletEvents, PubSubManager
from nanowallet.utils.pydantic import BaseModel
from nanowallet.utils.yaml import dict_from_yaml

logger = get_logger()

WALLET_TARGET = 'wallet'
ORACLE_TARGET = 'oracle'
NATIVE_ASSET = 'native'

# Client methods that are not contract methods.
_RESERVED_METHODS = frozenset({'deploy', 'transact', 'call', 'iter_events', 'iter_raw_events'})


class TokenSpec(BaseModel):
    symbol: str
    name: str
    supply: int
    holder: str


class WalletSpec(BaseModel):
    owner: str
    controllers: list[str] = []
    daily_limit: int
    # Account that deploys the wallet, the owner when not given.
    deployer: Optional[str] = None


class StepSpec(BaseModel):
    method: Optional[str] = None
    sender: Optional[str] = None
    target: str = WALLET_TARGET
    args: list[Any] = []
    expect_failure: Optional[str] = None
    advance: Optional[int] = None

    @model_validator(mode='after')
    def _check_kind(self) -> 'StepSpec':
        if (self.method is None) == (self.advance is None):
            raise ValueError('a step must have exactly one of `method` or `advance`')
        if self.advance is not None and self.advance < 0:
            raise ValueError('cannot advance the clock backwards')
        return self


class ScenarioSpec(BaseModel):
    start_time: int = 0
    accounts: list[str]
    balances: dict[str, int] = {}
    tokens: list[TokenSpec] = []
    rates: dict[str, int] = {}
    wallet: WalletSpec
    steps: list[StepSpec] = []


class ScenarioRunner:
    """Deploys the contracts of a scenario and replays its steps."""

    def __init__(self, spec: ScenarioSpec, *, settings: Optional[WalletSettings] = None) -> None:
        self.log = logger.new()
        self.spec = spec
        self.clock = Clock()
        self.clock.advance(spec.start_time)
        self.pubsub = PubSubManager()
        self.runner = Runner(
            generate_catalog(),
            NCMemoryStorageFactory(),
            reactor=self.clock,
            settings=settings,
            pubsub=self.pubsub,
        )
        self.accounts: dict[str, Address] = {
            name: Address(get_address_from_seed(name.encode('utf-8'))) for name in spec.accounts
        }
        self.tokens: dict[str, TokenClient] = {}
        self.oracle: Optional[OracleClient] = None
        self.wallet: Optional[WalletClient] = None
        self.printed_events: list[str] = []

    def account(self, name: str) -> Address:
        if name not in self.accounts:
            raise ScenarioError(f'unknown account: {name}')
        return self.accounts[name]

    def resolve(self, value: Any) -> Any:
        """Replace names in a step argument by the address or contract id they refer to."""
        if isinstance(value, list):
            return [self.resolve(item) for item in value]
        if not isinstance(value, str):
            return value
        if value in self.accounts:
            return self.accounts[value]
        if value in self.tokens:
            return self.tokens[value].contract_id
        if value == WALLET_TARGET and self.wallet is not None:
            return self.wallet.contract_id
        if value == ORACLE_TARGET and self.oracle is not None:
            return self.oracle.contract_id
        if value == NATIVE_ASSET:
            return NATIVE_TOKEN_UID
        return value

    def setup(self) -> None:
        """Seed balances and deploy the contracts."""
        spec = self.spec
        for name, amount in spec.balances.items():
            self.runner.credit_address(self.account(name), amount)

        owner = self.account(spec.wallet.owner)
        deployer = self.account(spec.wallet.deployer or spec.wallet.owner)

        self.oracle = OracleClient.deploy(self.runner, owner, salt=b'oracle')
        for token in spec.tokens:
            if token.symbol in self.tokens:
                raise ScenarioError(f'duplicate token symbol: {token.symbol}')
            self.tokens[token.symbol] = TokenClient.deploy(
                self.runner,
                self.account(token.holder),
                name=token.name,
                symbol=token.symbol,
                supply=token.supply,
                salt=token.symbol.encode('utf-8'),
            )
        for symbol, rate in spec.rates.items():
            if symbol not in self.tokens:
                raise ScenarioError(f'rate given for unknown token: {symbol}')
            self.oracle.set_rate(owner, self.tokens[symbol].contract_id, rate)

        self.pubsub.subscribe(NanoWalletEvents.NC_EVENT, self._on_event)
        self.wallet = WalletClient.deploy(
            self.runner,
            deployer,
            owner=owner,
            controllers=[self.account(name) for name in spec.wallet.controllers],
            oracle=self.oracle.contract_id,
            daily_limit=spec.wallet.daily_limit,
            salt=b'wallet',
        )

    def _on_event(self, key: NanoWalletEvents, args: EventArguments) -> None:
        event: NCEvent = args.event
        # The wallet id is not known yet while its initialize runs, which emits no event.
        if self.wallet is None or event.nc_id != self.wallet.contract_id:
            return
        line = parse_event(event.data).model_dump_json()
        self.printed_events.append(line)
        print(line, flush=True)

    def _get_target(self, target: str) -> ContractClient:
        if target == WALLET_TARGET:
            assert self.wallet is not None
            return self.wallet
        if target == ORACLE_TARGET:
            assert self.oracle is not None
            return self.oracle
        if target in self.tokens:
            return self.tokens[target]
        raise ScenarioError(f'unknown target: {target}')

    def run_step(self, index: int, step: StepSpec) -> bool:
        """Run a single step, returning whether it behaved as expected."""
        if step.advance is not None:
            self.clock.advance(step.advance)
            self.log.debug('clock advanced', step=index, now=self.clock.seconds())
            return True

        assert step.method is not None
        client = self._get_target(step.target)
        if step.method.startswith('_') or step.method in _RESERVED_METHODS or not hasattr(client, step.method):
            raise ScenarioError(f'step {index}: unknown method {step.target}.{step.method}')
        method = getattr(client, step.method)

        args = self.resolve(step.args)
        if step.sender is not None:
            args.insert(0, self.account(step.sender))

        try:
            result = method(*args)
        except NCTransactionFail as e:
            failure_names = {cls.__name__ for cls in type(e).__mro__}
            if step.expect_failure is not None and step.expect_failure in failure_names:
                self.log.info('step failed as expected', step=index, method=step.method, error=type(e).__name__)
                return True
            self.log.error('step failed', step=index, method=step.method, error=type(e).__name__, reason=str(e))
            return False

        if step.expect_failure is not None:
            self.log.error('step did not fail', step=index, method=step.method, expected=step.expect_failure)
            return False
        self.log.info('step', step=index, method=step.method, result=result)
        return True

    def run(self) -> bool:
        """Run the whole scenario, stopping at the first unexpected result."""
        self.setup()
        for index, step in enumerate(self.spec.steps):
            if not self.run_step(index, step):
                return False
        return True


def load_scenario(filepath: str) -> ScenarioSpec:
    return ScenarioSpec.model_validate(dict_from_yaml(filepath=filepath))


def create_parser() -> ArgumentParser:
    from nanowallet.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('scenario', help='Path to the scenario YAML file')
    parser.add_argument('--config-yaml', help='Settings YAML file, the global settings are used when not given')
    return parser


def execute(args: Namespace) -> int:
    settings = WalletSettings.from_yaml(filepath=args.config_yaml) if args.config_yaml else None
    scenario = ScenarioRunner(load_scenario(args.scenario), settings=settings)
    if not scenario.run():
        return 1
    return 0


def main():
    parser = create_parser()
    args = parser.parse_args()
    sys.exit(execute(args))
