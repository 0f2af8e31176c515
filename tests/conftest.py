"""Shared fixtures for timeledger tests."""
from typing import Optional

import pendulum
import pytest

from timeledger.model.entity_type import ReferenceKind
from timeledger.service.reference import MappingResolver
from timeledger.template.time_entry import get_time_entry_template


@pytest.fixture
def resolver():
    """A resolver with one item of every reference kind."""
    return MappingResolver(
        [
            {"id": "p-1", "kind": ReferenceKind.PROJECT, "name": "Bridge Retrofit"},
            {"id": "p-2", "kind": ReferenceKind.PROJECT, "name": "Annex"},
            {"id": "a-1", "kind": ReferenceKind.AREA_OF_FOCUS, "name": "Design"},
            {"id": "a-2", "kind": ReferenceKind.AREA_OF_FOCUS, "name": "Survey"},
            {"id": "100", "kind": ReferenceKind.COST_CODE, "name": "100 Labour"},
            {"id": "u-1", "kind": ReferenceKind.USER, "name": "Sam Field"},
        ]
    )


@pytest.fixture
def make_time_entry():
    """Build a finished time entry in UTC for the given clock times."""

    def factory(
        id: Optional[str] = "e-1",
        start: tuple[int, int] = (9, 0),
        end: Optional[tuple[int, int]] = (17, 0),
        day: pendulum.Date = pendulum.date(2024, 1, 15),
        updated: Optional[pendulum.DateTime] = None,
        **fields,
    ):
        start_time = pendulum.datetime(day.year, day.month, day.day, *start, tz="UTC")
        time_entry = get_time_entry_template(start_time)
        time_entry["id"] = id
        if end is not None:
            end_time = pendulum.datetime(day.year, day.month, day.day, *end, tz="UTC")
            if end_time <= start_time:
                end_time = end_time.add(days=1)
            time_entry["end_time"] = end_time
            time_entry["duration_seconds"] = int(
                (end_time - start_time).total_seconds()
            )
        if updated is not None:
            time_entry["updated"] = updated
        time_entry.update(fields)
        return time_entry

    return factory
