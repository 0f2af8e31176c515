# SPDX-License-Identifier: MIT


class EntityType:
    TIME_ENTRY = "time_entry"


class ReferenceKind:
    PROJECT = "project"
    AREA_OF_FOCUS = "area_of_focus"
    COST_CODE = "cost_code"
    USER = "user"

    ALL = [PROJECT, AREA_OF_FOCUS, COST_CODE, USER]
