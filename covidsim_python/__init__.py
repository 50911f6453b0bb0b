"""
CovidSim Python Interface

A Python wrapper for the Imperial College CovidSim individual-based model.
Reads and writes CovidSim parameter files, translates generalized model
input (calibration data and intervention schedules) into CovidSim
parameters, and runs the binary.
"""

from .covid_sim import CovidSim, RegionFiles
from .errors import FormatError, NotFoundError, ParameterError
from .imperial_params import (
    assign_admin_parameters,
    assign_parameters,
    assign_pre_parameters,
    set_parameter_family_to_0,
)
from .model_input import Intensity, InterventionPeriod, ModelInput, ModelParameters
from .parameter_file import ParameterFile
from .params_serialization import parse, serialize
from .schema_validator import (
    ModelInputSchemaValidator,
    SchemaValidator,
    validate_model_input,
    validate_model_input_safe,
)

__version__ = "0.1.0"
__author__ = "CovidSim Connector Development Team"

__all__ = [
    "CovidSim",
    "FormatError",
    "Intensity",
    "InterventionPeriod",
    "ModelInput",
    "ModelInputSchemaValidator",
    "ModelParameters",
    "NotFoundError",
    "ParameterError",
    "ParameterFile",
    "RegionFiles",
    "SchemaValidator",
    "assign_admin_parameters",
    "assign_parameters",
    "assign_pre_parameters",
    "parse",
    "serialize",
    "set_parameter_family_to_0",
    "validate_model_input",
    "validate_model_input_safe",
]
