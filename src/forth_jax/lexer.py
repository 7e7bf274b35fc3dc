"""Normalisation and longest-prefix recognizers for the stack language.

Each ``scan_*`` function looks at the front of the remaining input and
returns a :class:`Scan`. A miss carries a ``rest`` as well, but the driver
never adopts it: after a miss the next recognizer sees the same input.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Final

from .ast import Command, Declaration, Operator, Scan
from .errors import InvalidWord, UnknownWord
from .values import parse_cell, parse_unsigned

logger = logging.getLogger(__name__)

_OPERATORS: Final[dict[str, Operator]] = {op.value: op for op in Operator}
_COMMANDS: Final[dict[str, Command]] = {cmd.value: cmd for cmd in Command}


def _is_blank(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch) == "Cc"


def normalize(source: str) -> str:
    """Replace every whitespace or control character with a plain space."""
    return "".join(" " if _is_blank(ch) else ch for ch in source)


def _find_space(source: str) -> int | None:
    for i, ch in enumerate(source):
        if ch.isspace():
            return i
    return None


def split_token(source: str) -> tuple[str, str] | None:
    """Split at the first whitespace character, keeping it on the tail.

    Returns ``None`` when the input holds no whitespace at all.
    """
    pos = _find_space(source)
    if pos is None:
        return None
    return source[:pos], source[pos:]


def scan_number(source: str) -> Scan[int]:
    split = split_token(source)
    if split is None:
        value = parse_cell(source)
        if value is None:
            return Scan(None, source)
        return Scan(value, "")

    head, tail = split
    value = parse_cell(head)
    if value is None:
        return Scan(None, source.strip())
    return Scan(value, tail.lstrip())


def scan_operator(source: str) -> Scan[Operator]:
    if not source:
        return Scan(None, "")
    op = _OPERATORS.get(source[0])
    if op is None:
        return Scan(None, source)
    return Scan(op, source[1:].lstrip())


def scan_declaration(source: str) -> Scan[Declaration]:
    """Recognize ``: name body ;`` at the front of the input.

    Raises :class:`InvalidWord` when the terminator is missing, the body or
    the value is empty, or the name starts with a digit.
    """
    if not source.startswith(":"):
        return Scan(None, "")

    end = source.find(";")
    if end < 0:
        raise InvalidWord("word declaration is missing its ';' terminator")

    body = source[1:end].strip()
    if not body:
        raise InvalidWord("word declaration is empty")

    parts = body.split(None, 1)
    name = parts[0]
    value = parts[1].strip() if len(parts) > 1 else ""
    if not value:
        raise InvalidWord(f"word {name!r} has no definition")
    if name[0].isdecimal():
        raise InvalidWord(f"word {name!r} starts with a digit")

    return Scan(Declaration(name=name.lower(), body=value), source[end + 1 :].strip())


def scan_command(source: str) -> Scan[Command]:
    """Recognize a built-in stack command, case-insensitively.

    A bare unsigned numeral yields a miss with an empty remainder; any other
    unrecognized token raises :class:`UnknownWord`.
    """
    if not source:
        return Scan(None, "")

    split = split_token(source)
    if split is None:
        head, tail = source.lower(), ""
    else:
        head, tail = split[0].lower(), split[1].lstrip()

    command = _COMMANDS.get(head)
    if command is not None:
        return Scan(command, tail)
    if parse_unsigned(head) is not None:
        logger.debug("numeral %r reached the command stage", head)
        return Scan(None, "")
    raise UnknownWord(f"unknown word {head!r}")
