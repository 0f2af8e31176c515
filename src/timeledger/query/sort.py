# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Any, Callable, Mapping, Optional, TypeAlias, TypeVar

SortKey: TypeAlias = Callable[[Mapping[str, Any]], Any]

T = TypeVar("T", bound=Mapping[str, Any])


def sort_items(
    items: list[T],
    sort_instructions: list[str],
    keys: Optional[dict[str, SortKey]] = None,
) -> list[T]:
    """
    Sort by instructions like 'start_time' or 'desc duration', the first
    instruction taking precedence. Items whose key is None always go last.
    keys maps a column to a function computing its sort value.
    """
    sorted_items = deepcopy(items)
    key_functions = keys or {}

    for sort_instruction in reversed(sort_instructions):
        descending = False
        column = sort_instruction
        if " " in sort_instruction:
            direction, column = sort_instruction.split(" ")
            if direction == "desc":
                descending = True
        key = key_functions.get(column, _column_key(column))
        none_items = [item for item in sorted_items if key(item) is None]
        value_items = [item for item in sorted_items if key(item) is not None]
        value_items.sort(key=key, reverse=descending)
        sorted_items = value_items + none_items

    return sorted_items


def _column_key(column: str) -> SortKey:
    def key(item: Mapping[str, Any]) -> Any:
        value = item.get(column)
        if isinstance(value, str):
            return value.lower() if value != "" else None
        return value

    return key
