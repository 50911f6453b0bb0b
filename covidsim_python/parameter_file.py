"""
Parameter file management for CovidSim
"""

import copy
import logging
from typing import Any, Dict, Iterator

from .params_serialization import (
    ParameterDocument,
    ParameterValue,
    parse,
    serialize,
)

logger = logging.getLogger(__name__)


class ParameterFile:
    """
    A parsed CovidSim parameter file.

    Keeps a copy of the values it was created with, so that edits can be
    undone with ``reset``.
    """

    def __init__(self, params: ParameterDocument):
        """
        Initialize from a parameter document.

        Args:
            params: Parsed parameter values, in file order
        """
        self.params = params
        self._original = copy.deepcopy(params)

    @classmethod
    def from_text(cls, text: str) -> "ParameterFile":
        return cls(parse(text))

    @classmethod
    def from_file(cls, path: str) -> "ParameterFile":
        """Load a parameter file from disk."""
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        logger.debug("Loaded parameter file %s", path)
        return cls.from_text(text)

    def to_text(self) -> str:
        return serialize(self.params)

    def to_file(self, path: str) -> None:
        """Serialize the parameters and write them to ``path``."""
        content = self.to_text()
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.debug("Wrote %d parameters to %s", len(self.params), path)

    def get_param(self, key: str) -> ParameterValue:
        """
        Get a parameter value.

        Raises:
            KeyError: If the parameter is not present
        """
        if key not in self.params:
            raise KeyError(f"Unknown parameter: {key}")
        return self.params[key]

    def update_param(self, key: str, value: ParameterValue) -> None:
        """
        Set a parameter value.

        A parameter that already holds an array keeps its shape: the new
        value must be an array of the same length, and a scalar parameter
        only accepts scalars. New parameters are appended.

        Raises:
            ValueError: If the value does not match the existing shape
        """
        if key in self.params:
            current = self.params[key]
            if isinstance(current, list):
                if not isinstance(value, list) or len(value) != len(current):
                    raise ValueError(
                        f"Expected a list of length {len(current)} for '{key}', "
                        f"got {value!r}"
                    )
            elif isinstance(value, list):
                raise ValueError(f"Expected a scalar for '{key}', got {value!r}")
        self.params[key] = value

    def remove_param(self, key: str) -> None:
        """Remove a parameter, so the binary falls back to its default."""
        self.params.pop(key, None)

    def inject(self, updates: Dict[str, Any]) -> None:
        """Apply several ``update_param`` calls at once."""
        for key, value in updates.items():
            self.update_param(key, value)

    def reset(self) -> None:
        """Restore the values the file was loaded with."""
        self.params = copy.deepcopy(self._original)

    def keys(self) -> Iterator[str]:
        return iter(self.params.keys())

    def __contains__(self, key: str) -> bool:
        return key in self.params

    def __len__(self) -> int:
        return len(self.params)
