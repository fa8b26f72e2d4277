"""qshelper: order-preserving edits of URL query strings."""

__version__ = "0.1.0"

from qshelper.config import Config
from qshelper.datastructures import (
    KeyValue, PositionedEntry, StateChangeInstruction,
    coerce_instruction, flatten_instructions,
)
from qshelper.escaping import (
    Escaper, QueryParamEscaper, CallableEscaper, default_escaper,
)
from qshelper.exceptions import ValidationError, SequentialIndexError
from qshelper.helpers import QueryStringHelper, get_helper
from qshelper.indexing import OrderedIndexBuilder, index_query_string
from qshelper.querystring import QueryString, is_valid_query_string

__all__ = [
    "__version__",
    "Config",
    "KeyValue",
    "PositionedEntry",
    "StateChangeInstruction",
    "coerce_instruction",
    "flatten_instructions",
    "Escaper",
    "QueryParamEscaper",
    "CallableEscaper",
    "default_escaper",
    "ValidationError",
    "SequentialIndexError",
    "QueryStringHelper",
    "get_helper",
    "OrderedIndexBuilder",
    "index_query_string",
    "QueryString",
    "is_valid_query_string",
]
