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

from typing import Optional

from typing_extensions import Self

from nanowallet.client.base import ContractClient
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.types import CallerId, TokenUid


class OracleClient(ContractClient):
    """Client of the PriceOracle blueprint."""

    blueprint_name = 'PriceOracle'

    @classmethod
    def deploy(cls, runner: Runner, sender: CallerId, *, salt: Optional[bytes] = None) -> Self:
        return cls._deploy(runner, sender, salt=salt)

    def set_rate(self, sender: CallerId, token: bytes, rate: int) -> None:
        self.transact(sender, 'set_rate', TokenUid(token), rate)

    def rate(self, token: bytes) -> int:
        return self.call('rate', TokenUid(token))
