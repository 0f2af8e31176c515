# SPDX-License-Identifier: MIT

from typing import Literal, TypeAlias, TypedDict

DurationMode: TypeAlias = Literal["start", "end"]


class PendingEdit(TypedDict):
    start_time: str
    end_time: str
    duration: str  # hours, e.g. "2.5"
    # "start": end = start + duration, "end": start = end - duration
    duration_mode: DurationMode
