# SPDX-License-Identifier: MIT

from typing import TypedDict

from timeledger.model.entity_id import EntityId


class ReferenceItem(TypedDict):
    id: EntityId
    kind: str  # see ReferenceKind
    name: str
