"""The query string engine.

A :class:`QueryString` holds one query string as a map from key to the
ordered list of :class:`~qshelper.datastructures.PositionedEntry` objects
for that key. Each mutating method edits the map in place and returns the
rebuilt query string. Missing keys and out of range indexes are never an
error; the method simply leaves the state alone.

An instance is meant for a single owner performing a single operation.
It does no locking.
"""
import logging
from types import MappingProxyType

from qshelper.datastructures import KeyValue
from qshelper.datastructures import coerce_instruction
from qshelper.datastructures import flatten_instructions
from qshelper.escaping import default_escaper
from qshelper.exceptions import ValidationError
from qshelper.indexing import index_query_string

logger = logging.getLogger("qshelper")


def _is_valid_pair(pair):
    tokens = pair.split("=")
    # '=value' splits into ['', 'value'], so the key needs its own check.
    return len(tokens) == 2 and bool(tokens[0])


def is_valid_query_string(query_string):
    """Return ``True`` if every ``&`` separated pair is a ``key=value`` pair."""
    if not query_string:
        return False
    return all(_is_valid_pair(pair) for pair in query_string.split("&"))


class QueryString:
    """A validated, indexed query string.

    Build instances with :meth:`of`, which validates the raw query string
    first. Calling the class directly skips validation and is only meant
    for input that has already been checked with
    :func:`is_valid_query_string`::

        >>> qs = QueryString.of("a=1&b=2&a=3")
        >>> qs.get_all_values("a")
        ['1', '3']
        >>> qs.remove_nth("a", 0)
        'b=2&a=3'
    """

    def __init__(self, query_string, escaper=None):
        self.escaper = escaper if escaper is not None else default_escaper
        # Unescape once up front so rebuilding never double-escapes.
        self.original_query_string = self.escaper.unescape(query_string)
        self._state = index_query_string(self.original_query_string)

    @classmethod
    def of(cls, query_string, escaper=None):
        """Validate *query_string* and return an indexed instance.

        Raises :class:`~qshelper.exceptions.ValidationError` unless the
        query string holds at least one ``key=value`` pair and every pair
        is well formed.
        """
        if not is_valid_query_string(query_string):
            logger.debug("Rejecting query string %r", query_string)
            raise ValidationError(query_string)
        return cls(query_string, escaper)

    @property
    def state(self):
        """Read-only view of the key to entries map."""
        return MappingProxyType(self._state)

    def __repr__(self):
        return f"<{type(self).__name__} {self.original_query_string!r}>"

    def __str__(self):
        return self.reconstruct()

    def _entries(self):
        for entries in self._state.values():
            yield from entries

    def reconstruct(self):
        """Escape every entry and join them in absolute position order.

        Keys with no entries left contribute nothing, which is all a
        removal needs to disappear from the output.
        """
        entries = sorted(self._entries(), key=lambda entry: entry.position)
        escape = self.escaper.escape
        return "&".join(entry.pair.escape(escape) for entry in entries)

    def next_position(self):
        """Return the absolute position the next appended pair will get."""
        positions = [entry.position for entry in self._entries()]
        if not positions:
            return 0
        return max(positions) + 1

    # -- replacement -------------------------------------------------------

    def replace_first(self, key, value):
        """Replace the value of the first occurrence of *key*."""
        if key is None or not isinstance(value, str):
            return self.reconstruct()
        entries = self._state.get(key)
        if entries:
            entries[0] = entries[0].update_value(value)
            logger.debug("Replaced first %r with %r", key, value)
        return self.reconstruct()

    def replace_n(self, key, values):
        """Replace the first ``len(values)`` values of *key*, in order.

        Values beyond the number of existing occurrences are ignored, not
        appended. Values that are not strings leave their occurrence as is.
        """
        entries = self._state.get(key)
        if entries and values:
            for i, (entry, value) in enumerate(list(zip(entries, values))):
                if isinstance(value, str):
                    entries[i] = entry.update_value(value)
        return self.reconstruct()

    def replace_nth(self, instructions):
        """Replace values by relative index.

        *instructions* is either a nested mapping such as
        ``{"sort": {0: "stars,asc", 1: "address,desc"}}`` or an iterable of
        :class:`~qshelper.datastructures.StateChangeInstruction` or
        ``(key, index, value)`` triples. Instructions that cannot be decoded
        or that point outside a key's occurrences are skipped.
        """
        if instructions is None:
            return self.reconstruct()
        if hasattr(instructions, "items"):
            instructions = flatten_instructions(instructions)
        for item in instructions:
            instruction = coerce_instruction(item)
            if instruction is None:
                continue
            entries = self._state.get(instruction.key)
            if not entries:
                continue
            index = instruction.relative_index
            if 0 <= index < len(entries):
                entries[index] = entries[index].update_value(instruction.new_value)
        return self.reconstruct()

    # -- removal -----------------------------------------------------------

    def remove_first(self, key):
        """Remove the first occurrence of *key*."""
        entries = self._state.get(key)
        if entries:
            del entries[0]
        return self.reconstruct()

    def remove_all(self, keys):
        """Remove every occurrence of each key in *keys*."""
        if keys is not None:
            for key in keys:
                self._state.pop(key, None)
        return self.reconstruct()

    def remove_n(self, key, n):
        """Remove the first *n* occurrences of *key*."""
        if n is None or n <= 0:
            return self.reconstruct()
        entries = self._state.get(key)
        if entries is not None:
            if n >= len(entries):
                return self.remove_all([key])
            del entries[:n]
        return self.reconstruct()

    def remove_nth(self, key, index):
        """Remove the occurrence of *key* at relative *index*.

        ::

            a=100&b=200&a=300      a -> [100, 300]

            remove_nth("a", 1)  => a=100&b=200
        """
        entries = self._state.get(key)
        if entries and index is not None and 0 <= index < len(entries):
            del entries[index]
        return self.reconstruct()

    def remove_many_nth(self, key, indexes):
        """Remove the occurrences of *key* at each relative index in *indexes*.

        ::

            a=100&b=200&a=300&a=500     a -> [100, 300, 500]

            remove_many_nth("a", [0, 2])  => b=200&a=300
        """
        entries = self._state.get(key)
        if entries and indexes:
            indexes = set(indexes)
            entries[:] = [
                entry for i, entry in enumerate(entries) if i not in indexes
            ]
        return self.reconstruct()

    def remove_key_matching_value(self, key, value):
        """Remove each occurrence of *key* whose value equals *value*.

        ::

            a=500&b=700&a=700

            remove_key_matching_value("a", "700")  => a=500&b=700
        """
        entries = self._state.get(key)
        if entries is not None:
            self._state[key] = [entry for entry in entries if entry.value != value]
        return self.reconstruct()

    def remove_any_key_matching_value(self, value):
        """Remove every pair, whatever its key, whose value equals *value*.

        ::

            a=500&b=700&a=700

            remove_any_key_matching_value("700")  => a=500
        """
        for key, entries in self._state.items():
            self._state[key] = [entry for entry in entries if entry.value != value]
        return self.reconstruct()

    # -- lookup ------------------------------------------------------------

    def get_first_value(self, key):
        """Return the first value of *key*, or ``None``."""
        entries = self._state.get(key)
        if not entries:
            return None
        return entries[0].value

    def get_all_values(self, key):
        """Return every value of *key* in order, or an empty list."""
        return [entry.value for entry in self._state.get(key, ())]

    # -- addition ----------------------------------------------------------

    def _append(self, pair):
        entry = pair.to_entry(self.next_position())
        self._state.setdefault(pair.key, []).append(entry)
        logger.debug("Appended %s", entry)

    def add(self, key, value):
        """Append ``key=value`` to the end of the query string.

        Nothing happens if *key* already has exactly this value.
        """
        if key is None or value is None or value in self.get_all_values(key):
            return self.reconstruct()
        self._append(KeyValue(key, value))
        return self.reconstruct()

    def add_all(self, pairs):
        """Append each ``(key, value)`` pair in *pairs*, in order.

        Pairs that are not exactly two non-empty strings are skipped.
        Unlike :meth:`add`, existing values are not checked.
        """
        if pairs is not None:
            for pair in pairs:
                kv = KeyValue.from_pair(list(pair))
                if kv is None:
                    logger.debug("Skipping pair %r", pair)
                    continue
                self._append(kv)
        return self.reconstruct()
