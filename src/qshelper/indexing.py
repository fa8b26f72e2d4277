"""Builds the per-key state map from an unescaped query string.

Every accepted pair gets the next absolute position, and pairs sharing a
key are kept in encounter order. For example::

    suburb=Melbourne&postcode=3000&page=0&sort=stars,desc&country=AU&sort=name

is indexed as::

    suburb   = [0 -> suburb=Melbourne]
    postcode = [1 -> postcode=3000]
    page     = [2 -> page=0]
    sort     = [3 -> sort=stars,desc, 5 -> sort=name]
    country  = [4 -> country=AU]

``sort=name`` sits at absolute position 5 and relative index 1.
"""
import logging

from qshelper.datastructures import KeyValue
from qshelper.exceptions import SequentialIndexError

logger = logging.getLogger("qshelper")


class OrderedIndexBuilder:
    """A strictly sequential fold of :class:`KeyValue` pairs into a state map.

    The position counter lives on the builder, so one builder must see
    every pair exactly once and in order.
    """

    def __init__(self):
        self._position = 0

    @property
    def next_position(self):
        return self._position

    def supplier(self):
        return {}

    def accumulate(self, state, pair):
        entry = pair.to_entry(self._position)
        self._position += 1
        state.setdefault(pair.key, []).append(entry)
        return state

    def combine(self, left, right):
        raise SequentialIndexError(
            "Query string indexes cannot be combined; positions are assigned"
            " in encounter order and must be built sequentially."
        )

    def build(self, pairs):
        state = self.supplier()
        for pair in pairs:
            self.accumulate(state, pair)
        return state


def iter_pairs(query_string):
    """Yield each well formed pair of *query_string*, left to right.

    Malformed pairs and pairs with an empty value are skipped.
    """
    for token in query_string.split("&"):
        pair = KeyValue.from_key_value(token)
        if pair is None:
            if token:
                logger.debug("Skipping malformed pair %r", token)
            continue
        yield pair


def index_query_string(query_string):
    """Return the state map for an unescaped *query_string*."""
    return OrderedIndexBuilder().build(iter_pairs(query_string))
