"""Stateless helper functions over raw query strings.

Every method takes the raw query string as its first argument, builds a
fresh :class:`~qshelper.querystring.QueryString` and performs exactly one
operation on it. This is the surface meant for templates and views::

    helper = QueryStringHelper()
    helper.replace_first(request.query_string, "page", "2")
"""
import logging

from qshelper.querystring import QueryString


class QueryStringHelper:
    """One query string, one operation."""

    def __init__(self, escaper=None, logger=None):
        self.escaper = escaper
        self.logger = logger if logger is not None else logging.getLogger("qshelper")

    def parse(self, query_string):
        """Return a validated :class:`QueryString` for *query_string*."""
        return QueryString.of(query_string, self.escaper)

    def _apply(self, operation, query_string, *args):
        qs = self.parse(query_string)
        result = getattr(qs, operation)(*args)
        self.logger.debug("%s%r on %r -> %r", operation, args, query_string, result)
        return result

    def reconstruct(self, query_string):
        return self._apply("reconstruct", query_string)

    def replace_first(self, query_string, key, value):
        return self._apply("replace_first", query_string, key, value)

    def replace_n(self, query_string, key, values):
        return self._apply("replace_n", query_string, key, values)

    def replace_nth(self, query_string, instructions):
        return self._apply("replace_nth", query_string, instructions)

    def remove_first(self, query_string, key):
        return self._apply("remove_first", query_string, key)

    def remove_all(self, query_string, keys):
        return self._apply("remove_all", query_string, keys)

    def remove_n(self, query_string, key, n):
        return self._apply("remove_n", query_string, key, n)

    def remove_nth(self, query_string, key, index):
        return self._apply("remove_nth", query_string, key, index)

    def remove_many_nth(self, query_string, key, indexes):
        return self._apply("remove_many_nth", query_string, key, indexes)

    def remove_key_matching_value(self, query_string, key, value):
        return self._apply("remove_key_matching_value", query_string, key, value)

    def remove_any_key_matching_value(self, query_string, value):
        return self._apply("remove_any_key_matching_value", query_string, value)

    def get_first_value(self, query_string, key):
        return self._apply("get_first_value", query_string, key)

    def get_all_values(self, query_string, key):
        return self._apply("get_all_values", query_string, key)

    def add(self, query_string, key, value):
        return self._apply("add", query_string, key, value)

    def add_all(self, query_string, pairs):
        return self._apply("add_all", query_string, pairs)


_default_helper = None


def get_helper():
    """Return the shared helper using the default escaper."""
    global _default_helper
    if _default_helper is None:
        _default_helper = QueryStringHelper()
    return _default_helper
