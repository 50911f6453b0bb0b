#!/usr/bin/env python3
"""
Basic CovidSim run example

This script runs CovidSim for the United States or one of its states. The
model input is read from MODEL_INPUT_DIR/input.json unless a path is given
on the command line. Data, binary, output and log locations come from the
environment variables read by covidsim_python.config.
"""

import os
import sys
import logging

# Add the parent directory to the path to import covidsim_python
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from covidsim_python import CovidSim, RegionFiles, config, validate_model_input
from covidsim_python.model_input import ModelInput

# Set up logging
os.makedirs(config.LOG_DIR, exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(os.path.join(config.LOG_DIR, "runner.log")),
    ],
)
logger = logging.getLogger(__name__)


def main():
    """Run a single CovidSim simulation"""

    input_file = sys.argv[1] if len(sys.argv) > 1 else os.path.join(config.INPUT_DIR, "input.json")
    subregion_name = sys.argv[2] if len(sys.argv) > 2 else None

    logger.info("Loading model input from: %s", input_file)
    model_input = ModelInput.from_json(input_file)
    validate_model_input(model_input.to_dict())

    # Static files for the United States
    data_dir = config.MODEL_DATA_DIR
    region_files = RegionFiles(
        admin_file=os.path.join(data_dir, "admin_units", "United_States_admin.txt"),
        population_density_file=os.path.join(data_dir, "populations", "wpop_us_terr.txt"),
        pre_parameters_template=os.path.join(data_dir, "param_files", "preUS_R0=2.0.txt"),
        parameters_template=os.path.join(data_dir, "param_files", "p_NoInt.txt"),
        subregion_name=subregion_name,
        filter_admin_units=subregion_name is not None,
    )

    instance_folder = config.OUTPUT_DIR
    os.makedirs(instance_folder, exist_ok=True)

    logger.info("Initializing CovidSim run")
    model = CovidSim(model_input, region_files, instance_folder)
    model.setup()

    logger.info("Running simulation")

    try:
        uuid, output = model.run_model()
        logger.info("Simulation completed successfully")
        logger.info("Model instance UUID: %s", uuid)
        logger.info("Output saved to: %s", model.output_dir)
        logger.info("Simulated %d days", len(output["time"]["timestamps"]))

    except Exception as e:
        logger.error("Simulation failed: %s", str(e))
        raise


if __name__ == "__main__":
    main()
