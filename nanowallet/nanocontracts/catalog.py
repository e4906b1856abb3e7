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

from typing import TYPE_CHECKING, Type

from nanowallet.nanocontracts.exception import BlueprintDoesNotExist
from nanowallet.nanocontracts.utils import derive_blueprint_id

if TYPE_CHECKING:
    from nanowallet.nanocontracts.blueprint import Blueprint


class NCBlueprintCatalog:
    """Catalog of blueprints available."""

    def __init__(self, blueprints: dict[bytes, Type['Blueprint']]) -> None:
        self.blueprints = blueprints

    def get_blueprint_class(self, blueprint_id: bytes) -> Type['Blueprint']:
        """Return the blueprint class related to the given blueprint id."""
        blueprint_class = self.blueprints.get(blueprint_id, None)
        if blueprint_class is None:
            raise BlueprintDoesNotExist(blueprint_id.hex())
        return blueprint_class


def generate_catalog() -> NCBlueprintCatalog:
    """Generate a catalog with all built-in blueprints, each one under the id derived from its name."""
    from nanowallet.nanocontracts.blueprints import _blueprints_mapper

    blueprints: dict[bytes, Type['Blueprint']] = {}
    for name, blueprint_class in _blueprints_mapper.items():
        blueprints[derive_blueprint_id(name)] = blueprint_class
    return NCBlueprintCatalog(blueprints)
