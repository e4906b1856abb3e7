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
from enum import IntEnum, unique
from typing import TYPE_CHECKING, Any, Literal

from pydantic import field_serializer, field_validator

from nanowallet.nanocontracts.exception import NCInvalidEvent
from nanowallet.nanocontracts.types import ContractId
from nanowallet.reactor import ReactorProtocol
from nanowallet.utils.pydantic import BaseModel

if TYPE_CHECKING:
    from nanowallet.nanocontracts.runner import CallRecord

MAX_EVENT_SIZE: int = 1024  # 1KiB


@unique
class NCLogLevel(IntEnum):
    """The log level of NC execution logs."""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @staticmethod
    def from_str(value: str) -> NCLogLevel | None:
        """Create a NCLogLevel from a string, or return None if it's invalid."""
        try:
            return NCLogLevel[value]
        except KeyError:
            return None


class _BaseNCEntry(BaseModel):
    type: str
    level: NCLogLevel
    timestamp: float

    @field_serializer('level')
    def _serialize_level(self, level: NCLogLevel) -> str:
        return level.name

    @field_validator('level', mode='before')
    @classmethod
    def _parse_level(cls, level: NCLogLevel | int | str) -> NCLogLevel:
        if isinstance(level, NCLogLevel):
            return level
        if isinstance(level, int):
            return NCLogLevel(level)
        if isinstance(level, str):
            return NCLogLevel[level]
        raise TypeError(f'invalid level type: {type(level)}')


class NCLogEntry(_BaseNCEntry):
    """An entry representing a single log in a NC execution."""
    type: Literal['LOG'] = 'LOG'
    message: str
    key_values: dict[str, str] = {}


class NCCallBeginEntry(_BaseNCEntry):
    """An entry representing a single method call beginning in a NC execution."""
    type: Literal['CALL_BEGIN'] = 'CALL_BEGIN'
    level: NCLogLevel = NCLogLevel.DEBUG
    nc_id: str
    call_type: str
    method_name: str
    str_args: str = '()'
    actions: list[dict[str, Any]] | None = None

    @staticmethod
    def from_call_record(call_record: CallRecord, *, timestamp: float) -> NCCallBeginEntry:
        """Create a NCCallBeginEntry from a CallRecord."""
        actions = None
        if call_record.ctx is not None:
            ctx_json = call_record.ctx.to_json()
            actions = ctx_json['actions']

        return NCCallBeginEntry(
            nc_id=call_record.contract_id.hex(),
            call_type=call_record.type.value,
            method_name=call_record.method_name,
            str_args=str(call_record.args),
            timestamp=timestamp,
            actions=actions,
        )


class NCCallEndEntry(_BaseNCEntry):
    """An entry representing a single method call ending in a NC execution."""
    type: Literal['CALL_END'] = 'CALL_END'
    level: NCLogLevel = NCLogLevel.DEBUG


@dataclass(slots=True, frozen=True, kw_only=True)
class NCEvent:
    nc_id: ContractId
    data: bytes


@dataclass(slots=True)
class NCLogger:
    """
    A dataclass that provides instrumentation-related features, including logging-equivalent functionality
    saving log entries in memory, and emission of events.
    To be used inside Blueprints.

    There is one logger per execution, shared by every call in it, so entries and events are kept in call order.
    """
    __reactor__: ReactorProtocol
    __entries__: list[NCCallBeginEntry | NCLogEntry | NCCallEndEntry] = field(default_factory=list)
    __events__: list[NCEvent] = field(default_factory=list)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Create a new DEBUG log entry."""
        self.__log__(NCLogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Create a new INFO log entry."""
        self.__log__(NCLogLevel.INFO, message, **kwargs)

    def warn(self, message: str, **kwargs: Any) -> None:
        """Create a new WARN log entry."""
        self.__log__(NCLogLevel.WARN, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Create a new ERROR log entry."""
        self.__log__(NCLogLevel.ERROR, message, **kwargs)

    def __emit_event__(self, nc_id: ContractId, data: bytes) -> None:
        """Emit a custom event from a Nano Contract."""
        if not isinstance(data, bytes):
            raise NCInvalidEvent(f'event data must be of type `bytes`, found `{type(data).__name__}`')
        if len(data) > MAX_EVENT_SIZE:
            raise NCInvalidEvent(f'event data cannot be larger than {MAX_EVENT_SIZE} bytes, is {len(data)}')
        self.__events__.append(NCEvent(nc_id=nc_id, data=data))

    def __log__(self, level: NCLogLevel, message: str, **kwargs: Any) -> None:
        """Create a new log entry."""
        key_values = {k: v.hex() if isinstance(v, bytes) else str(v) for k, v in kwargs.items()}
        entry = NCLogEntry(level=level, message=message, key_values=key_values, timestamp=self.__reactor__.seconds())
        self.__entries__.append(entry)

    def __log_call_begin__(self, call_record: CallRecord) -> None:
        """Log the beginning of a call."""
        self.__entries__.append(NCCallBeginEntry.from_call_record(call_record, timestamp=self.__reactor__.seconds()))

    def __log_call_end__(self) -> None:
        """Log the end of a call."""
        self.__entries__.append(NCCallEndEntry(timestamp=self.__reactor__.seconds()))
