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

from nanowallet.conf.settings import NATIVE_TOKEN_UID
from nanowallet.nanocontracts.blueprint import Blueprint
from nanowallet.nanocontracts.component import Component
from nanowallet.nanocontracts.context import Context
from nanowallet.nanocontracts.exception import NCFail
from nanowallet.nanocontracts.runner import Runner
from nanowallet.nanocontracts.storage import NCMemoryStorageFactory, NCStorageFactory
from nanowallet.nanocontracts.types import public, view

__all__ = [
    'Blueprint',
    'Component',
    'Context',
    'Runner',
    'NCFail',
    'NCMemoryStorageFactory',
    'NCStorageFactory',
    'public',
    'view',
    'NATIVE_TOKEN_UID',
]
