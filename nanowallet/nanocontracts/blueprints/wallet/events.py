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

"""Events emitted by the wallet.

Every event is a pydantic model serialized as JSON bytes, with a `type` field used to tell them apart when decoding.
Addresses are rendered in base58.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BeforeValidator, Field, TypeAdapter

from nanowallet.crypto.util import get_address_b58_from_bytes
from nanowallet.utils.pydantic import BaseModel


def _to_b58(value: Any) -> Any:
    if isinstance(value, bytes):
        return get_address_b58_from_bytes(value)
    return value


B58Address = Annotated[str, BeforeValidator(_to_b58)]


class DepositEvent(BaseModel):
    type: Literal['Deposit'] = 'Deposit'
    sender: B58Address
    amount: int


class TransferEvent(BaseModel):
    type: Literal['Transfer'] = 'Transfer'
    to: B58Address
    # The zero address stands for the native currency.
    asset: B58Address
    amount: int


class TopUpGasEvent(BaseModel):
    type: Literal['TopUpGas'] = 'TopUpGas'
    initiator: B58Address
    owner: B58Address
    amount: int


class WhitelistAdditionEvent(BaseModel):
    type: Literal['WhitelistAddition'] = 'WhitelistAddition'
    addresses: list[B58Address]


class WhitelistRemovalEvent(BaseModel):
    type: Literal['WhitelistRemoval'] = 'WhitelistRemoval'
    addresses: list[B58Address]


class SetDailyLimitEvent(BaseModel):
    type: Literal['SetDailyLimit'] = 'SetDailyLimit'
    amount: int


class AddedControllerEvent(BaseModel):
    type: Literal['AddedController'] = 'AddedController'
    sender: B58Address
    controller: B58Address


class RemovedControllerEvent(BaseModel):
    type: Literal['RemovedController'] = 'RemovedController'
    sender: B58Address
    controller: B58Address


WalletEvent = Annotated[
    Union[
        DepositEvent,
        TransferEvent,
        TopUpGasEvent,
        WhitelistAdditionEvent,
        WhitelistRemovalEvent,
        SetDailyLimitEvent,
        AddedControllerEvent,
        RemovedControllerEvent,
    ],
    Field(discriminator='type'),
]

_wallet_event_adapter: TypeAdapter[WalletEvent] = TypeAdapter(WalletEvent)


def parse_event(data: bytes) -> WalletEvent:
    """Decode the payload of an event emitted by a wallet.

    It raises pydantic's ValidationError when the payload is not a wallet event.
    """
    return _wallet_event_adapter.validate_json(data)
