#!/usr/bin/env python3
"""
Parameter generation example

This script compiles an intervention schedule into CovidSim parameter files
without running the simulation, and shows the values that were written.
"""

import os
import sys
import logging
import tempfile

# Add the parent directory to the path to import covidsim_python
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from covidsim_python import (
    ModelParameters,
    ParameterFile,
    assign_parameters,
    assign_pre_parameters,
    validate_model_input_safe,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "..", "tests", "fixtures")

MODEL_INPUT = {
    "region": "US",
    "subregion": "US-AK",
    "parameters": {
        "calibrationDate": "2020-03-20",
        "calibrationCaseCount": 500,
        "calibrationDeathCount": 120,
        "r0": 2.5,
        "interventionPeriods": [
            {"startDate": "2020-03-01", "caseIsolation": "moderate", "socialDistancing": "mild"},
            {"startDate": "2020-03-10", "schoolClosure": "aggressive", "socialDistancing": 80},
            {"startDate": "2020-04-15", "voluntaryHomeQuarantine": "mild"},
        ],
    },
}


def demonstrate_validation():
    """Validate a good and a broken model input"""

    is_valid, _ = validate_model_input_safe(MODEL_INPUT, verbose=False)
    logger.info("Example model input valid: %s", is_valid)

    broken = {"region": "US", "parameters": {"calibrationDate": "yesterday"}}
    is_valid, errors = validate_model_input_safe(broken, verbose=False)
    logger.info("Broken model input valid: %s", is_valid)
    for error in errors:
        logger.info("  %s", error)


def demonstrate_parameter_generation():
    """Apply the intervention schedule to the templates"""

    parameters = ModelParameters.from_dict(MODEL_INPUT["parameters"])

    pre_params = ParameterFile.from_file(os.path.join(FIXTURES_DIR, "pre_params_template.txt"))
    assign_pre_parameters(pre_params.params, parameters)

    params = ParameterFile.from_file(os.path.join(FIXTURES_DIR, "p_NoInt.txt"))
    assign_parameters(params.params, parameters)

    for key in [
        "Day of year trigger is reached",
        "Day of year interventions start",
        "Alert trigger starts after interventions",
    ]:
        logger.info("%s: %s", key, pre_params.get_param(key))

    for key in [
        "Change times for levels of social distancing",
        "Proportion of detected cases isolated over time",
        "Relative spatial contact rates over time given social distancing",
        "Proportion of places remaining open after closure by place type over time",
    ]:
        logger.info("%s: %s", key, params.get_param(key))

    output_dir = tempfile.mkdtemp()
    pre_params.to_file(os.path.join(output_dir, "pre-params.txt"))
    params.to_file(os.path.join(output_dir, "input-params.txt"))
    logger.info("Parameter files written to: %s", output_dir)


def main():
    """Run all demonstrations"""
    demonstrate_validation()
    demonstrate_parameter_generation()


if __name__ == "__main__":
    main()
