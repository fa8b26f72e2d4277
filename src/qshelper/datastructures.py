"""Value types that make up the query string state."""
from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass

logger = logging.getLogger("qshelper")


@dataclass(frozen=True)
class KeyValue:
    """An unescaped ``key=value`` pair.

    Use :meth:`from_pair` or :meth:`from_key_value` to build one from
    untrusted input; both return ``None`` rather than an invalid pair.
    """

    key: str
    value: str

    @classmethod
    def from_pair(cls, pair: t.Sequence[str]) -> KeyValue | None:
        if len(pair) == 2 and pair[0] and pair[1]:
            return cls(pair[0], pair[1])
        return None

    @classmethod
    def from_key_value(cls, text: str) -> KeyValue | None:
        tokens = text.split("=")
        # Trailing empty tokens are dropped, so "key=" is a single token.
        while tokens and not tokens[-1]:
            tokens.pop()
        return cls.from_pair(tokens)

    def escape(self, escape_func: t.Callable[[str], str]) -> str:
        """Return ``key=value`` with both sides passed through *escape_func*.

        The state is kept unescaped so comparisons are simple; escaping
        only happens here, when the query string is rebuilt.
        """
        return f"{escape_func(self.key)}={escape_func(self.value)}"

    def to_entry(self, position: int) -> PositionedEntry:
        return PositionedEntry(position, self)

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class PositionedEntry:
    """A :class:`KeyValue` tagged with its absolute position in the query string.

    The position only drives ordering when the query string is rebuilt;
    changing the value keeps it.
    """

    position: int
    pair: KeyValue

    @property
    def key(self) -> str:
        return self.pair.key

    @property
    def value(self) -> str:
        return self.pair.value

    def update_value(self, value: str) -> PositionedEntry:
        return PositionedEntry(self.position, KeyValue(self.pair.key, value))

    def __str__(self) -> str:
        return f"{self.position} -> {self.pair}"


@dataclass(frozen=True)
class StateChangeInstruction:
    """Replace the value at *relative_index* of *key* with *new_value*."""

    key: str
    relative_index: int
    new_value: str


def _coerce_index(index):
    if isinstance(index, bool):
        return None
    if isinstance(index, int):
        return index
    if isinstance(index, str):
        try:
            return int(index.strip())
        except ValueError:
            return None
    return None


def _make_instruction(key, index, new_value):
    relative_index = _coerce_index(index)
    if (
        not isinstance(key, str)
        or relative_index is None
        or not isinstance(new_value, str)
    ):
        logger.debug(
            "Skipping replacement instruction %r[%r] = %r", key, index, new_value,
        )
        return None
    return StateChangeInstruction(key, relative_index, new_value)


def coerce_instruction(item) -> StateChangeInstruction | None:
    """Return *item* as a :class:`StateChangeInstruction`, or ``None``.

    *item* may already be an instruction or a ``(key, index, value)``
    triple decoded like the entries of :func:`flatten_instructions`.
    """
    if isinstance(item, StateChangeInstruction):
        item = (item.key, item.relative_index, item.new_value)
    try:
        key, index, new_value = item
    except (TypeError, ValueError):
        logger.debug("Skipping replacement instruction %r", item)
        return None
    return _make_instruction(key, index, new_value)


def flatten_instructions(mapping) -> list[StateChangeInstruction]:
    """Decode nested replacement instructions into a flat, typed list.

    ::

        {"sort": {0: "stars,asc", 1: "address,desc"}}

    becomes::

        [StateChangeInstruction("sort", 0, "stars,asc"),
         StateChangeInstruction("sort", 1, "address,desc")]

    Indexes may be ints or digit strings. Entries that cannot be decoded
    are skipped.
    """
    instructions = []
    if not mapping:
        return instructions
    for key, changes in mapping.items():
        if not isinstance(key, str) or not hasattr(changes, "items"):
            logger.debug("Skipping replacement instructions for %r", key)
            continue
        for index, new_value in changes.items():
            instruction = _make_instruction(key, index, new_value)
            if instruction is not None:
                instructions.append(instruction)
    return instructions
