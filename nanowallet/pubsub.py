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

from collections import defaultdict
from enum import Enum
from typing import Any, Callable


class NanoWalletEvents(Enum):
    """
    NC_EVENT:
        Publishes an event emitted by a contract, after the execution that emitted it has been committed.
        It has `event` attribute with the NCEvent.

    NC_EXECUTION_FAILED:
        Publishes a failed execution, after all of its changes have been discarded.
        It has `nc_id`, `method_name` and `exception` attributes.
    """
    NC_EVENT = 'nc:event'
    NC_EXECUTION_FAILED = 'nc:execution_failed'


class EventArguments:
    """Simple object for storing event arguments.
    """
    def __init__(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __contains__(self, key: str) -> bool:
        return key in self.__dict__


PubSubCallable = Callable[[NanoWalletEvents, EventArguments], None]


class PubSubManager:
    """Manages a pub/sub pattern bus.

    It is used to let independent objects respond to events.
    """
    def __init__(self) -> None:
        self._subscribers: defaultdict[NanoWalletEvents, list[PubSubCallable]] = defaultdict(list)

    def subscribe(self, key: NanoWalletEvents, fn: PubSubCallable) -> None:
        """Subscribe to a specific event.

        :param key: Name of the key to which to subscribe.
        :param fn: A function to be called when an event with `key` is published.
        """
        if fn not in self._subscribers[key]:
            self._subscribers[key].append(fn)

    def unsubscribe(self, key: NanoWalletEvents, fn: PubSubCallable) -> None:
        """Unsubscribe from a specific event.
        """
        if fn in self._subscribers[key]:
            self._subscribers[key].remove(fn)

    def publish(self, key: NanoWalletEvents, **kwargs: Any) -> None:
        """Publish a new event.

        :param key: Key of the new event.
        :param **kwargs: Named arguments to be given to the functions that will be called with this event.
        """
        args = EventArguments(**kwargs)
        for fn in list(self._subscribers[key]):
            fn(key, args)
