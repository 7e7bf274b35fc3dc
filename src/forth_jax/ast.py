"""Forms produced by the recognizers and consumed at once by the driver.

There is no tree: each form is built for a single prefix of the input,
executed, and dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    DIVIDE = "/"
    MULTIPLY = "*"


class Command(str, Enum):
    DROP = "drop"
    DUP = "dup"
    SWAP = "swap"
    OVER = "over"


@dataclass(frozen=True)
class Declaration:
    name: str
    body: str


@dataclass(frozen=True)
class Scan(Generic[T]):
    """Outcome of one recognizer: ``value`` is ``None`` when nothing matched."""

    value: T | None
    rest: str

    @property
    def matched(self) -> bool:
        return self.value is not None
