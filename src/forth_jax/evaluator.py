"""Evaluation driver for the stack language on top of int32 JAX cells."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from types import MappingProxyType
from typing import overload

from .ast import Command, Operator, Scan
from .errors import DivisionByZero, ErrorKind, ForthError, InvalidWord, StackUnderflow, UnknownWord
from .lexer import normalize, scan_command, scan_declaration, scan_number, scan_operator, split_token
from .values import apply_operator

logger = logging.getLogger(__name__)


def _normalize_word_name(name: str) -> str:
    return name.lower()


class Dictionary(MutableMapping[str, str]):
    """User words: lowercase name -> replacement text.

    Values are kept as raw text and re-parsed on every use, so a word sees
    the dictionary as it stands when it is expanded, not when it was
    declared.
    """

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        self.data: dict[str, str] = {}
        if data is not None:
            for key, value in data.items():
                self[key] = value

    def __getitem__(self, key: str) -> str:
        return self.data[_normalize_word_name(key)]

    def __setitem__(self, key: str, value: str) -> None:
        if not key or key[0].isdecimal():
            raise InvalidWord(f"invalid word name {key!r}")
        if not value.strip():
            raise InvalidWord(f"word {key!r} has no definition")
        self.data[_normalize_word_name(key)] = value

    def __delitem__(self, key: str) -> None:
        del self.data[_normalize_word_name(key)]

    def __iter__(self):
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return _normalize_word_name(key) in self.data

    def expand(self, source: str) -> Scan[str]:
        """Substitute a leading user word with its text.

        Only the first token is looked up. On a hit the new input is the
        word's text followed by the untouched tail, to be scanned again from
        the top.
        """
        split = split_token(source)
        head, tail = (source, "") if split is None else split
        value = self.data.get(_normalize_word_name(head))
        if value is None:
            return Scan(None, source)
        return Scan(value, value + tail)


class Forth:
    """Interpreter state: one integer stack and one word dictionary.

    Not safe for concurrent ``eval`` calls on the same instance.
    """

    def __init__(self, words: Mapping[str, str] | None = None) -> None:
        self._stack: list[int] = []
        self._words = Dictionary(words)

    def __repr__(self) -> str:
        return f"Forth(stack={self._stack!r}, words={self._words.data!r})"

    def stack(self) -> list[int]:
        """Snapshot of the stack, oldest cell first."""
        return list(self._stack)

    @property
    def words(self) -> Mapping[str, str]:
        return MappingProxyType(self._words.data)

    def eval(self, text: str) -> None:
        """Evaluate ``text`` against this instance.

        Raises a :class:`ForthError` subclass on the first failure; whatever
        ran before it is kept.
        """
        remaining = normalize(text)
        try:
            while remaining:
                before = remaining
                remaining = self._eval_numbers(remaining)
                remaining = self._eval_operators(remaining)
                remaining = self._eval_declarations(remaining)
                word_input = remaining
                remaining = self._eval_word(remaining)
                remaining = self._eval_commands(remaining)
                if remaining == before:
                    raise self._stalled(word_input)
        except ForthError as err:
            logger.debug("evaluation aborted by %s: %s", err.kind.value, err)
            raise

    def try_eval(self, text: str) -> ErrorKind | None:
        """Like :meth:`eval`, but report the failure instead of raising it."""
        try:
            self.eval(text)
        except ForthError as err:
            return err.kind
        return None

    def _stalled(self, word_input: str) -> UnknownWord:
        # A pass that consumed nothing: either a numeral outside the cell
        # range, or a word whose text ends by re-invoking itself.
        split = split_token(word_input)
        head = word_input if split is None else split[0]
        if head in self._words:
            return UnknownWord(f"word {head.lower()!r} expands to itself without end")
        return UnknownWord(f"unknown word {head!r}")

    def _pop(self) -> int:
        if not self._stack:
            raise StackUnderflow("stack is empty")
        return self._stack.pop()

    def _peek(self) -> int:
        if not self._stack:
            raise StackUnderflow("stack is empty")
        return self._stack[-1]

    def _eval_numbers(self, remaining: str) -> str:
        while True:
            scan = scan_number(remaining)
            if not scan.matched:
                return remaining
            self._stack.append(scan.value)
            remaining = scan.rest

    def _eval_operators(self, remaining: str) -> str:
        while True:
            scan = scan_operator(remaining)
            if not scan.matched:
                return remaining
            op = scan.value
            # underflow wins over a zero divisor
            if op is Operator.DIVIDE and len(self._stack) >= 2 and self._stack[-1] == 0:
                raise DivisionByZero("division by zero")
            right = self._pop()
            left = self._pop()
            self._stack.append(apply_operator(op, left, right))
            remaining = scan.rest

    def _eval_declarations(self, remaining: str) -> str:
        while True:
            scan = scan_declaration(remaining)
            if not scan.matched:
                return remaining
            decl = scan.value
            if decl.name in self._words:
                logger.debug("redefining word %r as %r", decl.name, decl.body)
            else:
                logger.debug("defining word %r as %r", decl.name, decl.body)
            self._words[decl.name] = decl.body
            remaining = scan.rest

    def _eval_word(self, remaining: str) -> str:
        scan = self._words.expand(remaining)
        if not scan.matched:
            return remaining
        logger.debug("expanded word to %r", scan.value)
        return scan.rest

    def _eval_commands(self, remaining: str) -> str:
        while True:
            scan = scan_command(remaining)
            if not scan.matched:
                return remaining
            self._run_command(scan.value)
            remaining = scan.rest

    def _run_command(self, command: Command) -> None:
        if command is Command.DROP:
            self._pop()
        elif command is Command.DUP:
            self._stack.append(self._peek())
        elif command is Command.SWAP:
            top = self._pop()
            below = self._pop()
            self._stack.append(top)
            self._stack.append(below)
        elif command is Command.OVER:
            top = self._pop()
            below = self._pop()
            self._stack.append(below)
            self._stack.append(top)
            self._stack.append(below)
        else:
            raise TypeError(f"Unsupported command: {command!r}")


@overload
def evaluate(source: str) -> list[int]:
    ...


@overload
def evaluate(source: str, forth: Forth) -> tuple[list[int], Forth]:
    ...


def evaluate(source: str, forth: Forth | None = None):
    """Evaluate source, optionally against a persistent interpreter.

    Without ``forth`` a fresh interpreter is used and its stack returned.
    With one, it is mutated in place and ``(stack, forth)`` is returned.
    """
    if forth is None:
        machine = Forth()
        machine.eval(source)
        return machine.stack()
    forth.eval(source)
    return forth.stack(), forth
