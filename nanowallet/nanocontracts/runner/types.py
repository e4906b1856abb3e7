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

from dataclasses import dataclass, field
from enum import StrEnum, auto, unique
from typing import TYPE_CHECKING, Any

from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.exception import NCNumberOfCallsExceeded, NCRecursionError
from nanowallet.nanocontracts.storage import NCChangesTracker
from nanowallet.nanocontracts.types import BlueprintId, ContractId

if TYPE_CHECKING:
    from nanowallet.nanocontracts.nc_exec_logs import NCEvent, NCLogger


@unique
class CallType(StrEnum):
    PUBLIC = auto()
    VIEW = auto()


@dataclass(slots=True, frozen=True, kw_only=True)
class CallRecord:
    """This object keeps information about a single call between contracts."""

    # The type of the method being called (public or view).
    type: CallType

    # The depth in the call stack.
    depth: int

    # The contract being invoked.
    contract_id: ContractId

    # The blueprint of the contract being invoked.
    blueprint_id: BlueprintId

    # The method being invoked.
    method_name: str

    # The context passed in this call. None when it's a VIEW call.
    ctx: Context | None

    # The args provided to the method.
    args: tuple[Any, ...]

    # Keep track of all changes made by this call.
    changes_tracker: NCChangesTracker


@dataclass(slots=True, kw_only=True)
class CallInfo:
    """This object keeps information about a method call and its subsequence calls."""
    MAX_RECURSION_DEPTH: int
    MAX_CALL_COUNTER: int

    # The execution stack. This stack is dynamic and changes as the execution progresses.
    stack: list[CallRecord] = field(default_factory=list)

    # Change trackers are grouped by account. Because multiple calls can occur between contracts, leading to more than
    # one NCChangesTracker per contract, a stack is used. Accounts that are only touched by balance changes, like user
    # addresses, have a single tracker.
    change_trackers: dict[bytes, list[NCChangesTracker]] = field(default_factory=dict)

    # A trace of the calls that happened.
    calls: list[CallRecord] = field(default_factory=list)

    # Counter of the number of calls performed so far. This is a dynamic value that changes as the
    # execution progresses.
    call_counter: int = 0

    # The logger to keep track of log entries and events during this call.
    nc_logger: NCLogger

    @property
    def depth(self) -> int:
        """Get the depth of the call stack."""
        return len(self.stack)

    def pre_call(self, call_record: CallRecord) -> None:
        """Called before a new call is executed."""
        if self.depth >= self.MAX_RECURSION_DEPTH:
            raise NCRecursionError

        if self.call_counter >= self.MAX_CALL_COUNTER:
            raise NCNumberOfCallsExceeded

        self.calls.append(call_record)

        if call_record.contract_id not in self.change_trackers:
            self.change_trackers[call_record.contract_id] = [call_record.changes_tracker]
        else:
            self.change_trackers[call_record.contract_id].append(call_record.changes_tracker)

        self.call_counter += 1
        self.stack.append(call_record)
        self.nc_logger.__log_call_begin__(call_record)

    def post_call(self, call_record: CallRecord) -> None:
        """Called after a call is finished."""
        assert call_record == self.stack.pop()
        assert call_record.changes_tracker == self.change_trackers[call_record.contract_id][-1]

        change_trackers = self.change_trackers[call_record.contract_id]
        if len(change_trackers) > 1:
            assert call_record.changes_tracker.storage == change_trackers[-2]
            assert call_record.changes_tracker == change_trackers.pop()
        self.nc_logger.__log_call_end__()

    def get_events(self) -> list[NCEvent]:
        return list(self.nc_logger.__events__)
