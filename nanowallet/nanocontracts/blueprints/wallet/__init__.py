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

from nanowallet.nanocontracts.blueprints.wallet.access import AccessRegistry
from nanowallet.nanocontracts.blueprints.wallet.daily_limit import DailyLimitAccount
from nanowallet.nanocontracts.blueprints.wallet.events import (
    AddedControllerEvent,
    DepositEvent,
    RemovedControllerEvent,
    SetDailyLimitEvent,
    TopUpGasEvent,
    TransferEvent,
    WalletEvent,
    WhitelistAdditionEvent,
    WhitelistRemovalEvent,
    parse_event,
)
from nanowallet.nanocontracts.blueprints.wallet.exceptions import (
    AuthorizationError,
    ExternalCallFailureError,
    InsufficientBudgetError,
    InvalidArgumentError,
    ProtocolStateError,
)
from nanowallet.nanocontracts.blueprints.wallet.pending import PendingAddressBatch, PendingAmount, PendingOperationSlot
from nanowallet.nanocontracts.blueprints.wallet.wallet import Wallet
from nanowallet.nanocontracts.blueprints.wallet.whitelist import Whitelist

__all__ = [
    'AccessRegistry',
    'AddedControllerEvent',
    'AuthorizationError',
    'DailyLimitAccount',
    'DepositEvent',
    'ExternalCallFailureError',
    'InsufficientBudgetError',
    'InvalidArgumentError',
    'PendingAddressBatch',
    'PendingAmount',
    'PendingOperationSlot',
    'ProtocolStateError',
    'RemovedControllerEvent',
    'SetDailyLimitEvent',
    'TopUpGasEvent',
    'TransferEvent',
    'Wallet',
    'WalletEvent',
    'Whitelist',
    'WhitelistAdditionEvent',
    'WhitelistRemovalEvent',
    'parse_event',
]
