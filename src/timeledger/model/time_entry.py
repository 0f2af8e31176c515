# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from timeledger.model.change_record import ChangeRecord
from timeledger.model.entity_id import EntityId


class TimeEntry(TypedDict):
    id: Optional[EntityId]
    entity_type: str  # "time_entry"
    user_id: Optional[str]
    project_id: Optional[str]
    area_of_focus_id: Optional[str]
    cost_code: Optional[str]
    date: pendulum.Date
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]  # None while a timer is running
    duration_seconds: Optional[int]
    note: Optional[str]
    history: list[ChangeRecord]  # Append-only, oldest first
    created: pendulum.DateTime
    updated: pendulum.DateTime


class TimeEntryDelta(TypedDict, total=False):
    """The reconciled fields a commit hands to the persistence sink."""

    user_id: Optional[str]
    project_id: Optional[str]
    area_of_focus_id: Optional[str]
    cost_code: Optional[str]
    date: pendulum.Date
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]
    duration_seconds: Optional[int]
    note: Optional[str]


class ReconciledTimes(TypedDict):
    start_time: pendulum.DateTime
    end_time: pendulum.DateTime
    duration_seconds: int
