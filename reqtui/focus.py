from __future__ import annotations

from enum import Enum


class Focus(Enum):
    URL = "url"
    METHOD = "method"
    HEADERS = "headers"
    BODY = "body"
    NAME = "name"


# Edit form cycle. NAME belongs to the save prompt only.
FOCUS_ORDER = (Focus.URL, Focus.METHOD, Focus.HEADERS, Focus.BODY)

NEXT_KEYS = ("tab", "ctrl+n")
PREVIOUS_KEYS = ("shift+tab", "ctrl+p")


def advance(focus: Focus) -> Focus:
    return _step(focus, 1)


def retreat(focus: Focus) -> Focus:
    return _step(focus, -1)


def _step(focus: Focus, offset: int) -> Focus:
    if focus not in FOCUS_ORDER:
        raise ValueError(f"{focus} is not part of the edit form")
    index = FOCUS_ORDER.index(focus)
    return FOCUS_ORDER[(index + offset) % len(FOCUS_ORDER)]
