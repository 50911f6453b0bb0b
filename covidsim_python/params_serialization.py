"""
Reader and writer for CovidSim ("Imperial") parameter files.

A parameter file is a sequence of entries, each a ``[Parameter name]`` line
followed by one or more value lines::

    [Number of level 1 administrative units to include]
    1

    [Codes and country/province names for admin units]
    610100	United_States	Alabama
    610200	United_States	Alaska

Any line that is not part of an entry is a comment. A value line starting
with ``#`` means "use the binary's built-in default", and the entry is
dropped when parsing.
"""

import logging
import numbers
import re
from typing import Any, Dict, List, Optional, Union

from .errors import FormatError

logger = logging.getLogger(__name__)

Scalar = Union[float, str]
ParameterValue = Union[Scalar, List[Scalar], List[List[Scalar]]]
ParameterDocument = Dict[str, ParameterValue]

SEPARATOR_REGEX = re.compile(r"[ \t]+")
ENTRY_REGEX = re.compile(r"^[A-Za-z0-9#]")
NUMBER_REGEX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse(text: str) -> ParameterDocument:
    """
    Parse the contents of a CovidSim parameter file.

    Args:
        text: File contents

    Returns:
        Dictionary of parameter values, in file order

    Raises:
        FormatError: If a key line has no closing bracket
    """
    result = {}
    lines = text.split("\n")
    n = len(lines)
    i = 0
    while i < n:
        line = lines[i].rstrip()
        i += 1
        if not line.startswith("["):
            continue
        if not line.endswith("]"):
            raise FormatError(f"Expected a closing square bracket on line {i}")

        key = line[1:-1]
        block = []
        while i < n and ENTRY_REGEX.match(lines[i]):
            block.append(lines[i])
            i += 1

        try:
            value = parse_value("\n".join(block))
        except ValueError as e:
            raise FormatError(
                f"Unable to parse the value for key '{key}': {block}"
            ) from e

        if value is None:
            logger.debug("Omitting parameter '%s' with no value", key)
            continue
        result[key] = value

    return result


def parse_value(text: str) -> Optional[ParameterValue]:
    """
    Parse the value block of a single entry.

    A block of several lines is a matrix with one row per line, a single
    line holding separated tokens is a vector, and anything else is a
    scalar. Returns None when the value is absent.

    Dropping absent tokens can leave a matrix with a single row or a vector
    with a single element; these collapse to a vector and a scalar, the
    shapes the same value has once written back out.
    """
    text = text.strip()

    # Multi-line matrices
    if "\n" in text:
        rows = [_parse_row(line) for line in text.split("\n")]
        rows = [row for row in rows if row is not None]
        if len(rows) == 1:
            return _collapse_vector(rows[0])
        return rows or None

    # Tab or space separated arrays
    if SEPARATOR_REGEX.search(text):
        return _collapse_vector(_parse_tokens(text))

    return _parse_scalar(text)


def _collapse_vector(values: List[Scalar]) -> Optional[ParameterValue]:
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def _parse_row(line: str) -> Optional[List[Scalar]]:
    line = line.strip()
    if SEPARATOR_REGEX.search(line):
        return _parse_tokens(line) or None
    value = _parse_scalar(line)
    return None if value is None else [value]


def _parse_tokens(line: str) -> List[Scalar]:
    values = [_parse_scalar(token) for token in SEPARATOR_REGEX.split(line)]
    return [value for value in values if value is not None]


def _parse_scalar(token: str) -> Optional[Scalar]:
    if token.startswith("#"):
        return None
    if NUMBER_REGEX.match(token):
        return float(token)
    return token


def serialize(data: ParameterDocument) -> str:
    """
    Generate the contents of a CovidSim parameter file.

    Args:
        data: Dictionary of parameter values

    Returns:
        File contents, one blank line between entries and a single trailing
        newline

    Raises:
        FormatError: If any parameter has no value
    """
    entries = []
    for key, value in data.items():
        serialized = serialize_value(value)
        if serialized is None:
            raise FormatError(f"Missing value for parameter '{key}'")
        entries.append(f"[{key}]\n{serialized}\n")
    return "\n".join(entries)


def serialize_value(value: Any) -> Optional[str]:
    """Serialize one parameter value, or return None if it is missing."""
    if isinstance(value, (list, tuple)):
        parts = [serialize_value(item) for item in value]
        if any(part is None for part in parts):
            return None
        # A 2D matrix is written one row per line
        if value and isinstance(value[0], (list, tuple)):
            return "\n".join(parts)
        return "\t".join(parts)
    if value is None:
        return None
    if isinstance(value, numbers.Real):
        return format_number(value)
    return str(value)


def format_number(value: numbers.Real) -> str:
    """
    Format a number the way CovidSim files write them: integral values
    without a decimal part, everything else in shortest round-trip form.
    """
    if isinstance(value, numbers.Integral):
        return str(int(value))
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
