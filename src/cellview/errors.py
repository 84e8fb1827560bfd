"""Exceptions raised by the glue around the repair engine.

The engine itself never raises: negative results are the ``NOT_JSON`` and
``FAILED`` values.
"""


class CellViewError(Exception):
    """Base class for cellview errors."""


class InputFormatError(CellViewError):
    """The input table could not be read."""


class SettingsError(CellViewError):
    """A settings update was rejected."""
