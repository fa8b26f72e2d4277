"""Configuration for qshelper."""
import json
import os

from werkzeug.utils import import_string

from qshelper.escaping import DEFAULT_SAFE_CHARS
from qshelper.escaping import QueryParamEscaper

DEFAULTS = {
    "DEBUG": False,
    "LOGGER_NAME": "qshelper",
    "ESCAPER": None,
    "ESCAPE_SAFE_CHARS": DEFAULT_SAFE_CHARS,
    "UNESCAPE_PLUS_AS_SPACE": True,
}


class Config(dict):
    """A dict of uppercase settings with a few loaders.

    Missing settings fall back to :data:`DEFAULTS`.
    """

    def __init__(self, defaults=None, root_path=None):
        self.root_path = os.fspath(root_path) if root_path else os.getcwd()
        super().__init__(DEFAULTS)
        if defaults:
            self.update(defaults)

    def from_mapping(self, mapping=None, **kwargs):
        """Update config from a mapping, an iterable of pairs or keyword arguments.

        Returns True.
        """
        if mapping is not None:
            if hasattr(mapping, "items"):
                for key, value in mapping.items():
                    self[key] = value
            else:
                for key, value in mapping:
                    self[key] = value
        for key, value in kwargs.items():
            self[key] = value
        return True

    def from_object(self, obj):
        """Update config from an object's uppercase attributes.

        *obj* may be an import string such as ``"myapp.settings"`` or
        ``"myapp.settings:Production"``.
        """
        if isinstance(obj, str):
            obj = import_string(obj)
        for key in dir(obj):
            if key.isupper():
                self[key] = getattr(obj, key)
        return True

    def from_file(self, filename, load=json.load, silent=False):
        """Update config from a file parsed by *load* (JSON by default).

        Returns True on success, False if *silent* and the file is missing.
        """
        filename = os.fspath(filename)
        if not os.path.isabs(filename):
            filename = os.path.join(self.root_path, filename)
        try:
            with open(filename) as f:
                obj = load(f)
        except FileNotFoundError:
            if silent:
                return False
            raise OSError(
                f"[Errno 2] Unable to load configuration file"
                f" (No such file or directory): {filename!r}"
            )
        return self.from_mapping(obj)

    def from_prefixed_env(self, prefix="QSHELPER", loads=json.loads):
        """Update config from environment variables starting with ``PREFIX_``.

        ``QSHELPER_DEBUG=true`` sets ``config["DEBUG"] = True``. Values that
        *loads* cannot decode are kept as strings.
        """
        prefix = prefix + "_"
        plen = len(prefix)
        for key in sorted(os.environ):
            if not key.startswith(prefix):
                continue
            value = os.environ[key]
            try:
                value = loads(value)
            except ValueError:
                pass
            self[key[plen:]] = value
        return True

    def get_namespace(self, namespace, lowercase=True, trim_namespace=True):
        """Return the settings whose key starts with *namespace*.

        ``get_namespace("ESCAPE_")`` returns ``{"safe_chars": ...}``.
        """
        result = {}
        for key, value in self.items():
            if not key.startswith(namespace):
                continue
            if trim_namespace:
                key = key[len(namespace):]
            if lowercase:
                key = key.lower()
            result[key] = value
        return result

    def make_escaper(self):
        """Return the configured escaper.

        Any object with ``escape`` and ``unescape`` methods is accepted.
        """
        escaper = self["ESCAPER"]
        if isinstance(escaper, str):
            escaper = import_string(escaper)
        if isinstance(escaper, type):
            escaper = escaper()
        if escaper is None:
            return QueryParamEscaper(
                safe=self["ESCAPE_SAFE_CHARS"],
                plus_as_space=bool(self["UNESCAPE_PLUS_AS_SPACE"]),
            )
        methods = (getattr(escaper, name, None) for name in ("escape", "unescape"))
        if not all(callable(method) for method in methods):
            raise TypeError(
                "ESCAPER must provide escape() and unescape(), got"
                f" {type(escaper).__name__}."
            )
        return escaper

    def make_helper(self):
        """Return a :class:`~qshelper.helpers.QueryStringHelper` for this config."""
        from qshelper.helpers import QueryStringHelper
        from qshelper.logging import create_logger

        logger = create_logger(self["LOGGER_NAME"], debug=bool(self["DEBUG"]))
        return QueryStringHelper(self.make_escaper(), logger)

    def __repr__(self):
        return f"<Config {dict.__repr__(self)}>"
