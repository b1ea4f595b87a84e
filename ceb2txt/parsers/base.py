from __future__ import annotations

import itertools
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

Value = Union[int, str, None]


class ContentFormat(str, Enum):
    STATEMENTS = "statements"
    ROWS = "rows"


@dataclass(slots=True)
class Row:
    table: str
    values: dict[str, Value]


@dataclass(slots=True)
class ImportSummary:
    format: ContentFormat
    executed: int = 0
    tables: Counter = field(default_factory=Counter)


def detect_format(lines: Iterable[str]) -> tuple[ContentFormat, Iterator[str]]:
    """Sniff the content format from its first non-whitespace character.

    Returns the detected format together with an iterator that still yields
    every line, including the ones consumed while peeking.
    """
    source = iter(lines)
    consumed: list[str] = []
    detected = ContentFormat.STATEMENTS
    for line in source:
        consumed.append(line)
        stripped = line.lstrip()
        if stripped:
            if stripped.startswith("["):
                detected = ContentFormat.ROWS
            break
    return detected, itertools.chain(consumed, source)
