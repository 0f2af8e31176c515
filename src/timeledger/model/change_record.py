# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum


class ChangeRecord(TypedDict):
    field: str
    old_value_display: str
    new_value_display: str
    changed_by: str
    changed_at: pendulum.DateTime
