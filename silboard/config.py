"""
Board Configuration
===================

Parameter sources for the simulated board. Sensor models pull their
settings through a ParameterSource so the core has no dependency on any
particular parameter server. Missing keys are not errors: every model
falls back to its documented default.
"""

import json
import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class MavType(str, Enum):
    """Simulated vehicle type."""
    MULTIROTOR = "multirotor"
    FIXEDWING = "fixedwing"

    @classmethod
    def parse(cls, value) -> 'MavType':
        """Accept a MavType or its name ("fixed-wing", "fixed_wing" too); raise ValueError otherwise."""
        if isinstance(value, cls):
            return value
        name = str(value).lower().replace("-", "").replace("_", "")
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown or unsupported mav type: {value!r}") from None


class ParameterSource(ABC):
    """Read-only key/value parameter lookup."""

    @abstractmethod
    def get(self, key: str, default: Any) -> Any:
        """Return the value for key, or default when absent."""

    def get_float(self, key: str, default: float) -> float:
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Parameter {key}={value!r} is not numeric, using {default}")
            return float(default)


class DictParameterSource(ParameterSource):
    """Parameters held in a plain mapping."""

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self._params: Dict[str, Any] = dict(params or {})

    def get(self, key: str, default: Any) -> Any:
        return self._params.get(key, default)

    def set(self, key: str, value: Any):
        self._params[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._params

    def to_dict(self) -> dict:
        return dict(self._params)


class JSONParameterSource(DictParameterSource):
    """
    Parameters loaded once from a flat JSON object.

    An unreadable or malformed file is logged and treated as empty, so the
    board still comes up on defaults.
    """

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict:
        if not self.path.exists():
            logger.warning(f"Parameter file {self.path} not found, using defaults")
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load parameters from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Parameter file {self.path} is not a JSON object, using defaults")
            return {}
        logger.info(f"Loaded {len(data)} parameters from {self.path}")
        return data
