# SPDX-License-Identifier: MIT

import uuid
from typing import TypeAlias

EntityId: TypeAlias = str

PROVISIONAL_PREFIX = "local-"


def generate_entity_id() -> EntityId:
    return str(uuid.uuid4())


def generate_provisional_id() -> EntityId:
    return f"{PROVISIONAL_PREFIX}{uuid.uuid4()}"


def is_provisional_id(id: EntityId) -> bool:
    return id.startswith(PROVISIONAL_PREFIX)
