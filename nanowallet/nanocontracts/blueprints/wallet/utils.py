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

from nanowallet.conf.settings import ADDRESS_SIZE
from nanowallet.nanocontracts.blueprints.wallet.exceptions import InvalidArgumentError


def check_address(address: bytes) -> None:
    """Raise InvalidArgumentError unless `address` is bytes of the address size."""
    if not isinstance(address, bytes) or len(address) != ADDRESS_SIZE:
        raise InvalidArgumentError(f'invalid address: {address!r}')
