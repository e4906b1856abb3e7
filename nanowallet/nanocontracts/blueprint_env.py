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

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence, final

from nanowallet.conf.settings import NATIVE_TOKEN_UID
from nanowallet.nanocontracts.types import Address, Amount, ContractId, NCAction, TokenUid

if TYPE_CHECKING:
    from nanowallet.conf.settings import WalletSettings
    from nanowallet.nanocontracts.nc_exec_logs import NCLogger
    from nanowallet.nanocontracts.runner import Runner
    from nanowallet.nanocontracts.storage import NCContractStorage


@final
class BlueprintEnvironment:
    """A class that holds all possible interactions a blueprint may have with the system."""

    __slots__ = ('__runner', '__log__', '__storage__')

    def __init__(self, runner: Runner, nc_logger: NCLogger, storage: NCContractStorage) -> None:
        self.__log__ = nc_logger
        self.__runner = runner
        self.__storage__ = storage

    def get_contract_id(self) -> ContractId:
        """Return the ContractId of the current nano contract."""
        return self.__runner.get_current_contract_id()

    def get_settings(self) -> WalletSettings:
        """Return the settings of the network the contract runs on."""
        return self.__runner.settings

    def get_current_balance(self, token_uid: TokenUid | None = None) -> Amount:
        """
        Return the current balance for a given token, which includes all actions and changes in the current call.

        For instance, if a contract has 50 and the call is requesting to withdraw 3, then this method will return 47.
        """
        contract_id = self.get_contract_id()
        return self.__runner.get_current_balance(contract_id, token_uid or TokenUid(NATIVE_TOKEN_UID))

    def get_address_balance(self, address: Address, token_uid: TokenUid | None = None) -> Amount:
        """Return the current balance of a user address for a given token."""
        return self.__runner.get_current_balance(address, token_uid or TokenUid(NATIVE_TOKEN_UID))

    def transfer_to_address(self, address: Address, amount: Amount, token: TokenUid) -> None:
        """Move `amount` of `token` from the current contract to a user address."""
        self.__runner.syscall_transfer_to_address(address, amount, token)

    def call_public_method(
        self,
        nc_id: ContractId,
        method_name: str,
        actions: Sequence[NCAction],
        *args: Any,
    ) -> Any:
        """Call a public method of another contract."""
        return self.__runner.syscall_call_another_contract_public_method(nc_id, method_name, actions, *args)

    def call_view_method(self, nc_id: ContractId, method_name: str, *args: Any) -> Any:
        """Call a view method of another contract."""
        return self.__runner.syscall_call_another_contract_view_method(nc_id, method_name, *args)

    def emit_event(self, data: bytes) -> None:
        """Emit a custom event from a Nano Contract."""
        self.__runner.syscall_emit_event(data)
