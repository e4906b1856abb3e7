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

from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable, Concatenate, Optional, ParamSpec, Sequence, TypeVar

from structlog import get_logger

from nanowallet.conf.get_settings import get_global_settings
from nanowallet.conf.settings import NATIVE_TOKEN_UID, WalletSettings
from nanowallet.nanocontracts.blueprint import Blueprint
from nanowallet.nanocontracts.blueprint_env import BlueprintEnvironment
from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.exception import (
    NCAlreadyInitializedContractError,
    NCForbiddenAction,
    NCInsufficientFunds,
    NCInvalidContractId,
    NCInvalidMethodCall,
    NCInvalidSyscall,
    NCMethodNotFound,
    NCTransactionFail,
    NCUnhandledUserException,
    NCUninitializedContractError,
    NCViewMethodError,
)
from nanowallet.nanocontracts.nc_exec_logs import NCEvent, NCLogger
from nanowallet.nanocontracts.runner.types import CallInfo, CallRecord, CallType
from nanowallet.nanocontracts.storage import NCChangesTracker, NCContractStorage, NCStorageFactory
from nanowallet.nanocontracts.types import (
    NC_ALLOWED_ACTIONS_ATTR,
    NC_INITIALIZE_METHOD,
    Address,
    Amount,
    BlueprintId,
    ContractId,
    NCAction,
    NCActionType,
    NCDepositAction,
    NCWithdrawalAction,
    TokenUid,
)
from nanowallet.nanocontracts.utils import is_nc_public_method, is_nc_view_method
from nanowallet.pubsub import NanoWalletEvents, PubSubManager
from nanowallet.reactor import ReactorProtocol, get_global_reactor

if TYPE_CHECKING:
    from nanowallet.nanocontracts.catalog import NCBlueprintCatalog

logger = get_logger()

P = ParamSpec('P')
T = TypeVar('T')


def _forbid_syscall_from_view(
    display_name: str,
) -> Callable[[Callable[Concatenate['Runner', P], T]], Callable[Concatenate['Runner', P], T]]:
    """Mark a syscall method as forbidden to be called from @view methods."""
    def decorator(fn: Callable[Concatenate['Runner', P], T]) -> Callable[Concatenate['Runner', P], T]:
        def wrapper(self: Runner, /, *args: P.args, **kwargs: P.kwargs) -> T:
            current_call_record = self.get_current_call_record()
            if current_call_record.type is CallType.VIEW:
                raise NCViewMethodError(f'@view method cannot call `syscall.{display_name}`')
            return fn(self, *args, **kwargs)
        return wrapper
    return decorator


class Runner:
    """Runner with support for call between contracts.

    Every call made through `create_contract()` or `call_public_method()` is an atomic execution: either every change
    made by it and by the contracts it calls is committed, or none is. Any NCTransactionFail discards all changes and is
    re-raised to the caller.
    """

    def __init__(
        self,
        catalog: NCBlueprintCatalog,
        storage_factory: NCStorageFactory,
        *,
        reactor: Optional[ReactorProtocol] = None,
        settings: Optional[WalletSettings] = None,
        pubsub: Optional[PubSubManager] = None,
    ) -> None:
        self.log = logger.new()
        self.catalog = catalog
        self.storage_factory = storage_factory
        self.reactor = reactor if reactor is not None else get_global_reactor()
        self.settings = settings or get_global_settings()
        self.pubsub = pubsub
        self._storages: dict[bytes, NCContractStorage] = {}

        # Blueprint of each initialized contract.
        self._contracts: dict[ContractId, BlueprintId] = {}

        # All events emitted by committed executions, in order.
        self._events: list[NCEvent] = []

        # Information about the last call.
        self._last_call_info: CallInfo | None = None

        # Information about the current call.
        self._call_info: CallInfo | None = None

    def get_last_call_info(self) -> CallInfo:
        """Get last call information."""
        assert self._last_call_info is not None
        return self._last_call_info

    def has_contract_been_initialized(self, contract_id: ContractId) -> bool:
        """Check whether a contract has been initialized."""
        return contract_id in self._contracts

    def get_storage(self, nc_id: bytes) -> NCContractStorage:
        """Return the committed storage of a contract or address. Storages stay locked outside of commits."""
        storage = self._storages.get(nc_id)
        if storage is None:
            storage = self.storage_factory(nc_id)
            storage.lock()
            self._storages[nc_id] = storage
        return storage

    def get_blueprint_id(self, contract_id: ContractId) -> BlueprintId:
        """Return the blueprint id of a contract."""
        blueprint_id = self._contracts.get(contract_id)
        if blueprint_id is None:
            raise NCUninitializedContractError(f'contract not initialized: {contract_id.hex()}')
        return blueprint_id

    def get_events(self, nc_id: ContractId | None = None) -> list[NCEvent]:
        """Return the events of all committed executions, optionally filtered by the contract that emitted them."""
        return [event for event in self._events if nc_id is None or event.nc_id == nc_id]

    def get_balance(self, nc_id: bytes, token_uid: TokenUid | None = None) -> int:
        """Return the committed balance of a contract or address."""
        return self.get_storage(nc_id).get_balance(token_uid or NATIVE_TOKEN_UID)

    def credit_address(self, address: Address, amount: int, token_uid: TokenUid | None = None) -> None:
        """Add funds to a user address. It is how value enters the system, for instance when loading a scenario."""
        assert self._call_info is None
        if amount <= 0:
            raise NCInvalidSyscall(f'amount must be positive: {amount}')
        storage = self.get_storage(address)
        storage.unlock()
        storage.add_balance(token_uid or NATIVE_TOKEN_UID, amount)
        storage.lock()
        self.log.debug('address credited', address=address.hex(), amount=amount)

    def _build_call_info(self) -> CallInfo:
        return CallInfo(
            MAX_RECURSION_DEPTH=self.settings.NC_MAX_RECURSION_DEPTH,
            MAX_CALL_COUNTER=self.settings.NC_MAX_CALL_COUNTER,
            nc_logger=NCLogger(__reactor__=self.reactor),
        )

    def create_contract(self, contract_id: ContractId, blueprint_id: BlueprintId, ctx: Context, *args: Any) -> Any:
        """Create contract and call its initialize() method."""
        if self.has_contract_been_initialized(contract_id):
            raise NCAlreadyInitializedContractError(contract_id.hex())

        # The blueprint must exist. If an unknown blueprint is provided, it will raise an BlueprintDoesNotExist.
        self.catalog.get_blueprint_class(blueprint_id)

        self._contracts[contract_id] = blueprint_id
        try:
            return self._execute(contract_id, NC_INITIALIZE_METHOD, ctx, args)
        except NCTransactionFail:
            del self._contracts[contract_id]
            raise

    def call_public_method(self, contract_id: ContractId, method_name: str, ctx: Context, *args: Any) -> Any:
        """Call a contract public method."""
        if method_name == NC_INITIALIZE_METHOD:
            raise NCInvalidMethodCall('cannot call initialize from call_public_method(); use create_contract()')
        return self._execute(contract_id, method_name, ctx, args)

    def _execute(self, contract_id: ContractId, method_name: str, ctx: Context, args: tuple[Any, ...]) -> Any:
        """Run a whole execution, committing all changes at the end or discarding them on failure."""
        assert self._call_info is None
        self._call_info = self._build_call_info()
        try:
            ret = self._unsafe_call_public_method(contract_id, method_name, ctx, args)
        except NCTransactionFail as e:
            self._reset_all_change_trackers()
            self.log.info('execution failed', nc_id=contract_id.hex(), method=method_name, error=repr(e))
            if self.pubsub is not None:
                self.pubsub.publish(
                    NanoWalletEvents.NC_EXECUTION_FAILED,
                    nc_id=contract_id,
                    method_name=method_name,
                    exception=e,
                )
            raise
        finally:
            self._last_call_info = self._call_info
            self._call_info = None

        events = self._last_call_info.get_events()
        self._events.extend(events)
        self.log.debug('execution committed', nc_id=contract_id.hex(), method=method_name, events=len(events))
        if self.pubsub is not None:
            for event in events:
                self.pubsub.publish(NanoWalletEvents.NC_EVENT, event=event)
        return ret

    def _unsafe_call_public_method(
        self,
        contract_id: ContractId,
        method_name: str,
        ctx: Context,
        args: tuple[Any, ...],
    ) -> Any:
        """Invoke a public method, then validate and commit all changes."""
        blueprint_id = self.get_blueprint_id(contract_id)

        ret = self._execute_public_method_call(
            contract_id=contract_id,
            blueprint_id=blueprint_id,
            method_name=method_name,
            ctx=ctx,
            args=args,
        )

        self._validate_balances()
        self._commit_all_changes_to_storage()
        return ret

    @_forbid_syscall_from_view('call_public_method')
    def syscall_call_another_contract_public_method(
        self,
        contract_id: ContractId,
        method_name: str,
        actions: Sequence[NCAction],
        *args: Any,
    ) -> Any:
        """Call another contract's public method. This method must be called by a blueprint during an execution."""
        assert self._call_info is not None
        if method_name == NC_INITIALIZE_METHOD:
            raise NCInvalidMethodCall('cannot call initialize from another contract')

        if self.get_current_contract_id() == contract_id:
            raise NCInvalidContractId('a contract cannot call itself')

        blueprint_id = self.get_blueprint_id(contract_id)

        first_ctx = self._call_info.stack[0].ctx
        assert first_ctx is not None

        ctx = first_ctx.copy_for_caller(self.get_current_contract_id(), actions)
        return self._execute_public_method_call(
            contract_id=contract_id,
            blueprint_id=blueprint_id,
            method_name=method_name,
            ctx=ctx,
            args=args,
        )

    def _reset_all_change_trackers(self) -> None:
        """Discard all changes of the current execution."""
        assert self._call_info is not None
        for change_trackers in self._call_info.change_trackers.values():
            for change_tracker in change_trackers:
                if not change_tracker.has_been_commited:
                    change_tracker.reset()

    def _validate_balances(self) -> None:
        """
        Validate that all balances are non-negative and that the execution neither created nor destroyed funds.
        """
        assert self._call_info is not None

        # total_diffs accumulates the balance differences for all accounts touched during this execution.
        total_diffs: defaultdict[bytes, int] = defaultdict(int)

        for change_trackers in self._call_info.change_trackers.values():
            assert len(change_trackers) == 1, 'after execution, each account must have exactly one change tracker'
            change_tracker = change_trackers[0]
            change_tracker.validate_balances()

            for balance_key, diff in change_tracker.get_balance_diff().items():
                total_diffs[balance_key.token_uid] += diff

        assert all(diff == 0 for diff in total_diffs.values()), (
            f'change tracker diffs do not add up to zero: {total_diffs}'
        )

    def _commit_all_changes_to_storage(self) -> None:
        """Commit all change trackers."""
        assert self._call_info is not None
        for nc_id, change_trackers in self._call_info.change_trackers.items():
            assert len(change_trackers) == 1
            change_tracker = change_trackers[0]

            nc_storage = self.get_storage(nc_id)
            assert change_tracker.storage == nc_storage
            nc_storage.unlock()
            change_tracker.commit()
            nc_storage.lock()

    def _execute_public_method_call(
        self,
        *,
        contract_id: ContractId,
        blueprint_id: BlueprintId,
        method_name: str,
        ctx: Context,
        args: tuple[Any, ...],
    ) -> Any:
        """An internal method that actually execute the public method call.
        It is also used when a contract calls another contract.
        """
        assert self._call_info is not None

        changes_tracker = self._create_changes_tracker(contract_id)
        blueprint = self._create_blueprint_instance(blueprint_id, changes_tracker)
        method = self._get_method(blueprint, method_name)

        if not is_nc_public_method(method):
            raise NCInvalidMethodCall(f'method `{method_name}` is not a public method')

        call_record = CallRecord(
            type=CallType.PUBLIC,
            depth=self._call_info.depth,
            contract_id=contract_id,
            blueprint_id=blueprint_id,
            method_name=method_name,
            ctx=ctx,
            args=args,
            changes_tracker=changes_tracker,
        )
        self._call_info.pre_call(call_record)

        self._validate_actions(method, method_name, ctx)
        caller_changes_tracker = self.get_current_changes_tracker_or_create(ctx.caller_id)
        for action in ctx.actions_list:
            self._apply_action(action, caller=caller_changes_tracker, callee=changes_tracker)

        try:
            ret = method(ctx, *args)
        except NCTransactionFail:
            raise
        except Exception as e:
            # Convert any other exception to NCTransactionFail.
            raise NCUnhandledUserException(f'{type(e).__name__}: {e}') from e

        if len(self._call_info.change_trackers[contract_id]) > 1:
            call_record.changes_tracker.commit()

        self._call_info.post_call(call_record)
        return ret

    @staticmethod
    def _apply_action(action: NCAction, *, caller: NCChangesTracker, callee: NCChangesTracker) -> None:
        """Move the funds of an action between the caller and the contract being called."""
        match action:
            case NCDepositAction():
                caller.add_balance(action.token_uid, -action.amount)
                callee.add_balance(action.token_uid, action.amount)
            case NCWithdrawalAction():
                callee.add_balance(action.token_uid, -action.amount)
                caller.add_balance(action.token_uid, action.amount)
            case _:
                raise NotImplementedError(f'unknown action: {action!r}')

    def call_view_method(self, contract_id: ContractId, method_name: str, *args: Any) -> Any:
        """Call a contract view method."""
        assert self._call_info is None
        self._call_info = self._build_call_info()
        try:
            return self._unsafe_call_view_method(contract_id, method_name, args)
        finally:
            self._reset_all_change_trackers()
            self._last_call_info = self._call_info
            self._call_info = None

    def syscall_call_another_contract_view_method(self, contract_id: ContractId, method_name: str, *args: Any) -> Any:
        """Call the view method of another contract."""
        assert self._call_info is not None
        if self.get_current_contract_id() == contract_id:
            raise NCInvalidContractId('a contract cannot call itself')
        return self._unsafe_call_view_method(contract_id, method_name, args)

    def _unsafe_call_view_method(self, contract_id: ContractId, method_name: str, args: tuple[Any, ...]) -> Any:
        """Call a contract view method without handling resets."""
        assert self._call_info is not None
        blueprint_id = self.get_blueprint_id(contract_id)

        changes_tracker = self._create_changes_tracker(contract_id)
        blueprint = self._create_blueprint_instance(blueprint_id, changes_tracker)
        method = self._get_method(blueprint, method_name)

        if not is_nc_view_method(method):
            raise NCInvalidMethodCall(f'method `{method_name}` is not a view method')

        call_record = CallRecord(
            type=CallType.VIEW,
            depth=self._call_info.depth,
            contract_id=contract_id,
            blueprint_id=blueprint_id,
            method_name=method_name,
            ctx=None,
            args=args,
            changes_tracker=changes_tracker,
        )
        self._call_info.pre_call(call_record)

        try:
            ret = method(*args)
        except NCTransactionFail:
            raise
        except Exception as e:
            raise NCUnhandledUserException(f'{type(e).__name__}: {e}') from e

        if not changes_tracker.is_empty():
            raise NCViewMethodError('view methods cannot change the state')

        self._call_info.post_call(call_record)
        return ret

    @staticmethod
    def _get_method(blueprint: Blueprint, method_name: str) -> Any:
        """Return the bound method, looking it up on the class so fields are never read."""
        if not callable(getattr(type(blueprint), method_name, None)):
            raise NCMethodNotFound(f'method `{method_name}` not found')
        return getattr(blueprint, method_name)

    def get_current_balance(self, nc_id: bytes, token_uid: TokenUid) -> Amount:
        """
        Return the current balance of a contract or address for a given token,
        which includes all actions and changes in the current call.
        """
        if self._call_info is None:
            storage = self.get_storage(nc_id)
        else:
            storage = self.get_current_changes_tracker_or_storage(nc_id)
        return Amount(storage.get_balance(token_uid))

    def get_current_call_record(self) -> CallRecord:
        """Return the call record for the current method being executed."""
        assert self._call_info is not None
        return self._call_info.stack[-1]

    def get_current_contract_id(self) -> ContractId:
        """Return the contract id for the current method being executed."""
        call_record = self.get_current_call_record()
        return call_record.contract_id

    def get_current_changes_tracker_or_storage(self, nc_id: bytes) -> NCContractStorage:
        """Return the current NCChangesTracker if it exists or NCContractStorage otherwise."""
        if self._call_info is not None and nc_id in self._call_info.change_trackers:
            change_trackers = self._call_info.change_trackers[nc_id]
            assert len(change_trackers) > 0
            return change_trackers[-1]
        else:
            return self.get_storage(nc_id)

    def get_current_changes_tracker_or_create(self, nc_id: bytes) -> NCChangesTracker:
        """Return the current NCChangesTracker of an account, creating a new one on top of its storage if needed.

        It is used for accounts that have no call of their own in the execution, like the address of a user."""
        assert self._call_info is not None
        change_trackers = self._call_info.change_trackers.get(nc_id)
        if change_trackers:
            return change_trackers[-1]
        changes_tracker = NCChangesTracker(nc_id, self.get_storage(nc_id))
        self._call_info.change_trackers[nc_id] = [changes_tracker]
        return changes_tracker

    def _create_changes_tracker(self, nc_id: bytes) -> NCChangesTracker:
        """Create a new changes tracker on top of the most recent one, or on top of the storage."""
        storage = self.get_current_changes_tracker_or_storage(nc_id)
        return NCChangesTracker(nc_id, storage)

    @_forbid_syscall_from_view('transfer_to_address')
    def syscall_transfer_to_address(self, address: Address, amount: int, token_uid: TokenUid) -> None:
        """Move funds from the current contract to a user address."""
        if amount <= 0:
            raise NCInvalidSyscall(f'amount must be positive: {amount}')
        contract_id = self.get_current_contract_id()
        if address == contract_id:
            raise NCInvalidSyscall('a contract cannot transfer to itself')

        changes_tracker = self.get_current_changes_tracker_or_create(contract_id)
        balance = changes_tracker.get_balance(token_uid)
        if balance < amount:
            raise NCInsufficientFunds(f'insufficient balance: {balance} < {amount} (token_uid={token_uid.hex()})')

        changes_tracker.add_balance(token_uid, -amount)
        self.get_current_changes_tracker_or_create(address).add_balance(token_uid, amount)

    def _validate_actions(self, method: Any, method_name: str, ctx: Context) -> None:
        """Check whether actions are allowed."""
        allowed_actions: set[NCActionType] = getattr(method, NC_ALLOWED_ACTIONS_ATTR, set())
        assert isinstance(allowed_actions, set)

        for action in ctx.actions_list:
            if action.type not in allowed_actions:
                raise NCForbiddenAction(f'action {action.name} is forbidden on method `{method_name}`')

    def _create_blueprint_instance(self, blueprint_id: BlueprintId, changes_tracker: NCChangesTracker) -> Blueprint:
        """Create a new blueprint instance."""
        assert self._call_info is not None
        env = BlueprintEnvironment(self, self._call_info.nc_logger, changes_tracker)
        blueprint_class = self.catalog.get_blueprint_class(blueprint_id)
        return blueprint_class(env)

    @_forbid_syscall_from_view('emit_event')
    def syscall_emit_event(self, data: bytes) -> None:
        """Emit a custom event from a Nano Contract."""
        assert self._call_info is not None
        self._call_info.nc_logger.__emit_event__(self.get_current_contract_id(), data)
