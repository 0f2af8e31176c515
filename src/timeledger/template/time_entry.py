# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from timeledger.model.entity_type import EntityType
from timeledger.model.time_entry import TimeEntry
from timeledger.time import now_local


def get_time_entry_template(now: Optional[pendulum.DateTime] = None) -> TimeEntry:
    if now is None:
        now = now_local()
    return {
        "id": None,
        "entity_type": EntityType.TIME_ENTRY,
        "user_id": None,
        "project_id": None,
        "area_of_focus_id": None,
        "cost_code": None,
        "date": now.date(),
        "start_time": now,
        "end_time": None,
        "duration_seconds": None,
        "note": None,
        "history": [],
        "created": now,
        "updated": now,
    }
