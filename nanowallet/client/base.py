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

import os
from typing import Any, ClassVar, Iterator, Optional, Sequence

from structlog import get_logger
from typing_extensions import Self

from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.nc_exec_logs import NCEvent
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.types import CallerId, ContractId, NCAction
from nanowallet.nanocontracts.utils import derive_blueprint_id, derive_contract_id

logger = get_logger()


class ContractClient:
    """Binding to a single contract, used by off-chain code.

    Public methods are sent with `transact()`, stamping the context with the clock of the runner's reactor. View
    methods are read with `call()`. Failures are raised as they come from the runner.
    """

    blueprint_name: ClassVar[str]

    def __init__(self, runner: Runner, contract_id: ContractId) -> None:
        self.log = logger.new(blueprint=self.blueprint_name, contract_id=contract_id.hex())
        self.runner = runner
        self.contract_id = contract_id

    @staticmethod
    def _make_context(runner: Runner, sender: CallerId, actions: Sequence[NCAction] = ()) -> Context:
        return Context(caller_id=sender, timestamp=int(runner.reactor.seconds()), actions=actions)

    @classmethod
    def _deploy(cls, runner: Runner, sender: CallerId, *args: Any, salt: Optional[bytes] = None) -> Self:
        """Create a new contract of this blueprint and return a client bound to it."""
        contract_id = derive_contract_id(salt if salt is not None else os.urandom(32))
        blueprint_id = derive_blueprint_id(cls.blueprint_name)
        runner.create_contract(contract_id, blueprint_id, cls._make_context(runner, sender), *args)
        client = cls(runner, contract_id)
        client.log.info('contract deployed')
        return client

    def transact(self, sender: CallerId, method_name: str, *args: Any, actions: Sequence[NCAction] = ()) -> Any:
        """Call a public method as `sender`."""
        self.log.debug('transact', method=method_name, sender=sender.hex())
        ctx = self._make_context(self.runner, sender, actions)
        return self.runner.call_public_method(self.contract_id, method_name, ctx, *args)

    def call(self, method_name: str, *args: Any) -> Any:
        """Call a view method."""
        return self.runner.call_view_method(self.contract_id, method_name, *args)

    def iter_raw_events(self) -> Iterator[NCEvent]:
        """Iterate over the committed events of this contract, oldest first."""
        yield from self.runner.get_events(self.contract_id)
