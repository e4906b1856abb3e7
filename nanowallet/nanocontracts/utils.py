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

import hashlib
from typing import Callable

from nanowallet.conf.settings import ADDRESS_SIZE
from nanowallet.nanocontracts.types import NC_METHOD_TYPE_ATTR, BlueprintId, ContractId, NCMethodType

BLUEPRINT_ID_PREFIX: bytes = b'blueprint'
CONTRACT_ID_PREFIX: bytes = b'contract'


def is_nc_public_method(method: Callable) -> bool:
    """Return True if the method is nc_public."""
    return getattr(method, NC_METHOD_TYPE_ATTR, None) is NCMethodType.PUBLIC


def is_nc_view_method(method: Callable) -> bool:
    """Return True if the method is nc_view."""
    return getattr(method, NC_METHOD_TYPE_ATTR, None) is NCMethodType.VIEW


def derive_blueprint_id(blueprint_name: str) -> BlueprintId:
    """Derive the id of a built-in blueprint from its name."""
    h = hashlib.sha256()
    h.update(BLUEPRINT_ID_PREFIX)
    h.update(blueprint_name.encode('utf-8'))
    return BlueprintId(h.digest())


def derive_contract_id(salt: bytes) -> ContractId:
    """Derive a contract id from a salt. Contract ids have the same size as addresses."""
    h = hashlib.sha256()
    h.update(CONTRACT_ID_PREFIX)
    h.update(salt)
    return ContractId(h.digest()[:ADDRESS_SIZE])
