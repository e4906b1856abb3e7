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

from pathlib import Path
from typing import Union

from pydantic import field_validator

from nanowallet.utils.pydantic import BaseModel
from nanowallet.utils.yaml import dict_from_extended_yaml

# Smallest unit multiples of the native currency, the same way wei relates to finney and ether.
FINNEY: int = 10**15
ETHER: int = 10**18

# Size of an address in bytes. Contract ids and token uids share this size.
ADDRESS_SIZE: int = 20

# The native currency is identified by the zero address wherever an asset identity is required.
NATIVE_TOKEN_UID: bytes = b'\x00' * ADDRESS_SIZE


class WalletSettings(BaseModel):
    # Name of the network: "mainnet", "unittests", ...
    NETWORK_NAME: str

    # Length of a daily limit accounting window, in seconds.
    WALLET_LIMIT_PERIOD: int = 24 * 60 * 60

    # Maximum number of addresses in a single staged whitelist addition or removal.
    WALLET_MAX_BATCH_SIZE: int = 20

    # The owner's native balance is never topped up beyond this value.
    WALLET_TOP_UP_GAS_CEILING: int = 500 * FINNEY

    # Limits of a single execution, counting contract to contract calls.
    NC_MAX_RECURSION_DEPTH: int = 100
    NC_MAX_CALL_COUNTER: int = 250

    @field_validator(
        'WALLET_LIMIT_PERIOD',
        'WALLET_MAX_BATCH_SIZE',
        'WALLET_TOP_UP_GAS_CEILING',
        'NC_MAX_RECURSION_DEPTH',
        'NC_MAX_CALL_COUNTER',
    )
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('must be a positive integer')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'WalletSettings':
        """Takes a filepath to a yaml file and returns a validated WalletSettings instance."""
        settings_dict = dict_from_extended_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
