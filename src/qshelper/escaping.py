"""Escaping collaborators used at the edges of a :class:`~qshelper.QueryString`.

The engine unescapes once when it is constructed and escapes once per
key and value when it rebuilds the query string. Anything providing
``escape`` and ``unescape`` can be plugged in.
"""
from urllib.parse import quote, unquote

#: Characters left as-is inside a query parameter, on top of the RFC 3986
#: unreserved set. ``&``, ``=``, ``+`` and ``#`` are never in this set.
DEFAULT_SAFE_CHARS = "!$'()*,;:@/?"

_NEVER_SAFE = frozenset("&=+#% ")


class Escaper:
    """Base class for query parameter escapers."""

    def escape(self, text):
        raise NotImplementedError

    def unescape(self, text):
        raise NotImplementedError


class QueryParamEscaper(Escaper):
    """Percent-encodes text for use as a query parameter key or value.

    Text is UTF-8 encoded before escaping. Unescaping decodes ``%HH``
    sequences, leaves malformed ones untouched and, unless
    *plus_as_space* is false, turns ``+`` into a space.
    """

    def __init__(self, safe=DEFAULT_SAFE_CHARS, plus_as_space=True):
        unsafe = _NEVER_SAFE.intersection(safe)
        if unsafe:
            raise ValueError(
                "Characters {!r} can never be left unescaped in a query"
                " parameter.".format("".join(sorted(unsafe)))
            )
        self.safe = safe
        self.plus_as_space = plus_as_space

    def escape(self, text):
        return quote(text, safe=self.safe, encoding="utf-8", errors="strict")

    def unescape(self, text):
        if self.plus_as_space:
            text = text.replace("+", " ")
        return unquote(text, encoding="utf-8", errors="replace")

    def __repr__(self):
        return (
            f"<{type(self).__name__} safe={self.safe!r}"
            f" plus_as_space={self.plus_as_space!r}>"
        )


class CallableEscaper(Escaper):
    """Adapts a pair of plain functions to the :class:`Escaper` interface."""

    def __init__(self, escape, unescape):
        self._escape = escape
        self._unescape = unescape

    def escape(self, text):
        return self._escape(text)

    def unescape(self, text):
        return self._unescape(text)


default_escaper = QueryParamEscaper()
