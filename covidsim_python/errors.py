"""
Exception types raised while reading, writing and rewriting CovidSim
parameter files.
"""


class ParameterError(ValueError):
    """Base class for CovidSim parameter file errors."""


class FormatError(ParameterError):
    """
    A parameter file or document is malformed: an unterminated key bracket,
    an unparseable value block, or an entry that has no value to serialize.
    """


class NotFoundError(ParameterError, LookupError):
    """An expected entry could not be found, or was not unique."""
