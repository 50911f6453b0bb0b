"""
Generalized model input records.

These mirror the JSON documents accepted by the model runner. JSON keys are
camelCase; the dataclasses use snake_case attributes and convert with
``from_dict`` / ``to_dict``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Intensity(str, Enum):
    """Qualitative level of an intervention."""

    MILD = "mild"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


# An intervention is either a qualitative intensity or, in the numeric
# variant of the input schema, a reduction-in-contact percentage (0-100).
InterventionLevel = Union[Intensity, float]

INTERVENTION_FIELDS = {
    "socialDistancing": "social_distancing",
    "schoolClosure": "school_closure",
    "caseIsolation": "case_isolation",
    "voluntaryHomeQuarantine": "voluntary_home_quarantine",
}


def _intervention_level(value: Any) -> Optional[InterventionLevel]:
    if value is None:
        return None
    if isinstance(value, Intensity):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    try:
        return Intensity(value)
    except ValueError:
        raise ValueError(f"Invalid intervention intensity: {value!r}")


def _level_to_json(value: Optional[InterventionLevel]) -> Any:
    if isinstance(value, Intensity):
        return value.value
    return value


@dataclass
class InterventionPeriod:
    """A time window with a fixed set of interventions."""

    start_date: str
    social_distancing: Optional[InterventionLevel] = None
    school_closure: Optional[InterventionLevel] = None
    case_isolation: Optional[InterventionLevel] = None
    voluntary_home_quarantine: Optional[InterventionLevel] = None
    reduction_population_contact: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterventionPeriod":
        kwargs = {
            attr: _intervention_level(data.get(key))
            for key, attr in INTERVENTION_FIELDS.items()
        }
        return cls(
            start_date=data["startDate"],
            reduction_population_contact=data.get("reductionPopulationContact"),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"startDate": self.start_date}
        for key, attr in INTERVENTION_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                result[key] = _level_to_json(value)
        if self.reduction_population_contact is not None:
            result["reductionPopulationContact"] = self.reduction_population_contact
        return result


@dataclass
class ModelParameters:
    """Calibration data and the intervention schedule for one run."""

    calibration_date: str
    calibration_case_count: int = 0
    calibration_death_count: int = 0
    r0: Optional[float] = None
    intervention_periods: List[InterventionPeriod] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelParameters":
        return cls(
            calibration_date=data["calibrationDate"],
            calibration_case_count=data.get("calibrationCaseCount", 0),
            calibration_death_count=data.get("calibrationDeathCount", 0),
            r0=data.get("r0"),
            intervention_periods=[
                InterventionPeriod.from_dict(period)
                for period in data.get("interventionPeriods", [])
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calibrationDate": self.calibration_date,
            "calibrationCaseCount": self.calibration_case_count,
            "calibrationDeathCount": self.calibration_death_count,
            "r0": self.r0,
            "interventionPeriods": [p.to_dict() for p in self.intervention_periods],
        }


@dataclass
class ModelInput:
    """A generalized description of the input to an epidemiological model."""

    region: str
    parameters: ModelParameters
    subregion: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelInput":
        return cls(
            region=data["region"],
            subregion=data.get("subregion"),
            parameters=ModelParameters.from_dict(data["parameters"]),
        )

    @classmethod
    def from_json(cls, json_path: str) -> "ModelInput":
        """
        Load a model input from a JSON file.

        Accepts either a bare model input or a runner request that wraps it
        in a ``configuration`` field.
        """
        with open(json_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if "configuration" in data:
            data = data["configuration"]
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        result = {"region": self.region}
        if self.subregion is not None:
            result["subregion"] = self.subregion
        result["parameters"] = self.parameters.to_dict()
        return result
