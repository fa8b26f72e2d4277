"""Exceptions raised by qshelper."""


class ValidationError(ValueError):
    """Raised when a query string has no usable ``key=value`` pairs."""

    def __init__(self, query_string, message=None):
        self.query_string = query_string
        if message is None:
            message = "Query string must have at least one key=value pair"
        super().__init__(f"{message}: {query_string!r}")


class SequentialIndexError(RuntimeError):
    """Raised when the query index is built with a combining step.

    Absolute positions come from a counter that follows encounter order,
    so partial indexes can never be merged. Seeing this means the caller
    has a bug; it is not meant to be caught.
    """
