"""Exceptions raised at the edges of dsconv (config, input, selection, emit)."""


class DSConvError(Exception):
    """Base class for all dsconv errors."""


class ConfigError(DSConvError):
    """Raised when a configuration file or option is invalid."""


class TargetError(DSConvError):
    """Raised when an input source cannot be read."""


class SelectionError(DSConvError):
    """Raised for an invalid declaration filter."""


class EmitError(DSConvError):
    """Raised when struct code cannot be generated with the given options."""
