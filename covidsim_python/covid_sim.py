"""
Runner for the CovidSim binary.

Prepares the run-specific parameter files from a model input, launches the
binary and converts its output.
"""

import json
import logging
import os
import shutil
import subprocess
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from . import config
from .convert_output import SEVERITY_OUTPUT_FILENAME, convert_output
from .imperial_params import (
    assign_admin_parameters,
    assign_parameters,
    assign_pre_parameters,
)
from .model_input import ModelInput
from .parameter_file import ParameterFile

logger = logging.getLogger(__name__)

# These are taken from the CovidSim regression test
SEEDS = ["98798150", "729101", "17389101", "4797132"]

DEFAULT_R0 = 3.0

PRE_PARAMETERS_FILENAME = "pre-params.txt"
PARAMETERS_FILENAME = "input-params.txt"
ADMIN_PARAMETERS_FILENAME = "admin-params.txt"
LOG_FILENAME = "covid-sim.log"
OUTPUT_FILENAME = "data.json"


@dataclass
class RegionFiles:
    """
    Static CovidSim input files for one region.

    ``filter_admin_units`` is set for subregions that share their country's
    admin file, which then has to be restricted to ``subregion_name``.
    """

    admin_file: str
    population_density_file: str
    pre_parameters_template: str
    parameters_template: str
    subregion_name: Optional[str] = None
    filter_admin_units: bool = False


class CovidSim:
    def __init__(
        self,
        model_input: Union[ModelInput, Dict[str, Any], str],
        region_files: RegionFiles,
        instance_folder: str,
        day0: Optional[str] = None,
    ):
        """
        Initialize a CovidSim run.

        Args:
            model_input: ModelInput, model input dictionary, or path to a
                         model input JSON file
            region_files: Static input files for the run's region
            instance_folder: Folder under which the run folder is created
            day0: Reference date for "day of year" parameters and output
                  timestamps (default ``config.DAY0``)
        """
        assert os.path.exists(instance_folder), (
            f"Instance folder not found: {instance_folder}"
        )

        self.model_input = self.handle_model_input(model_input)
        self.region_files = region_files
        self.instance_folder = instance_folder
        self.day0 = day0 if day0 is not None else config.DAY0

        self.uuid = str(uuid.uuid4())
        self.model_state_folder = os.path.join(instance_folder, self.uuid)
        self.input_dir = os.path.join(self.model_state_folder, "input")
        self.output_dir = os.path.join(self.model_state_folder, "output")
        self.log_dir = os.path.join(self.model_state_folder, "log")
        for folder in (self.input_dir, self.output_dir, self.log_dir):
            os.makedirs(folder, exist_ok=True)

        self.executable_path = None
        self.thread_count = config.THREAD_COUNT
        self.setup_complete = False

        self.input_files: List[str] = []
        self.admin_path = None
        self.pre_parameters_path = None
        self.parameters_path = None

    @staticmethod
    def handle_model_input(
        model_input: Union[ModelInput, Dict[str, Any], str]
    ) -> ModelInput:
        """
        Accept model input as an object, a dictionary or a JSON file path.

        Raises:
            ValueError: If the input is none of these
        """
        if isinstance(model_input, ModelInput):
            return model_input
        if isinstance(model_input, dict):
            return ModelInput.from_dict(model_input)
        if isinstance(model_input, str) and os.path.exists(model_input):
            return ModelInput.from_json(model_input)
        raise ValueError(f"Invalid model input: {model_input!r}")

    def setup(
        self, executable_path: Optional[str] = None, thread_count: Optional[int] = None
    ) -> "CovidSim":
        """
        Locate the CovidSim binary.

        Args:
            executable_path: Path to the binary (default ``BIN_DIR/CovidSim``)
            thread_count: Number of threads the binary may use
        """
        if executable_path is None:
            executable_path = os.path.join(config.BIN_DIR, "CovidSim")
        assert os.path.exists(executable_path), (
            f"CovidSim executable not found at {executable_path}"
        )

        self.executable_path = executable_path
        if thread_count is not None:
            self.thread_count = thread_count
        self.setup_complete = True
        logger.info("CovidSim set up with executable %s", executable_path)
        return self

    def prepare_inputs(self) -> List[str]:
        """
        Generate the run-specific parameter files from the templates.

        Returns:
            Every file the run reads, templates included
        """
        parameters = self.model_input.parameters
        files = self.region_files
        input_files = []

        # Pre-parameters: alert trigger
        input_files.append(files.pre_parameters_template)
        pre_params = ParameterFile.from_file(files.pre_parameters_template)
        assign_pre_parameters(pre_params.params, parameters, day0=self.day0)
        self.pre_parameters_path = os.path.join(self.input_dir, PRE_PARAMETERS_FILENAME)
        pre_params.to_file(self.pre_parameters_path)

        # Parameters: intervention schedule
        input_files.append(files.parameters_template)
        params = ParameterFile.from_file(files.parameters_template)
        assign_parameters(params.params, parameters)
        self.parameters_path = os.path.join(self.input_dir, PARAMETERS_FILENAME)
        params.to_file(self.parameters_path)

        # Only subregions without their own admin file need the admin units
        # filtered.
        if files.subregion_name and files.filter_admin_units:
            input_files.append(files.admin_file)
            admin_params = ParameterFile.from_file(files.admin_file)
            assign_admin_parameters(admin_params.params, files.subregion_name)
            self.admin_path = os.path.join(self.input_dir, ADMIN_PARAMETERS_FILENAME)
            admin_params.to_file(self.admin_path)
        else:
            self.admin_path = os.path.join(
                self.input_dir, os.path.basename(files.admin_file)
            )
            shutil.copyfile(files.admin_file, self.admin_path)

        input_files.extend(
            [
                self.admin_path,
                files.population_density_file,
                self.pre_parameters_path,
                self.parameters_path,
            ]
        )
        self.input_files = input_files
        logger.info("Prepared %d CovidSim input files in %s", len(input_files), self.input_dir)
        return input_files

    def build_command(self) -> List[str]:
        """Command line for the CovidSim binary."""
        if not self.setup_complete:
            raise RuntimeError("CovidSim not set up. Call setup() first.")
        if self.parameters_path is None:
            raise RuntimeError("Inputs not prepared. Call prepare_inputs() first.")

        r0 = self.model_input.parameters.r0
        if r0 is None:
            r0 = DEFAULT_R0
        name_parts = [self.model_input.region, self.region_files.subregion_name]
        network_file = "-".join(p for p in name_parts if p) + "-network.bin"

        return [
            self.executable_path,
            f"/c:{self.thread_count}",
            f"/A:{self.admin_path}",
            f"/D:{self.region_files.population_density_file}",
            f"/PP:{self.pre_parameters_path}",
            f"/P:{self.parameters_path}",
            f"/O:{os.path.join(self.output_dir, 'result')}",
            f"/R:{r0 / 2.0}",
            f"/S:{os.path.join(self.output_dir, network_file)}",
            *SEEDS,
        ]

    def run_model(self) -> Tuple[str, Dict[str, Any]]:
        """
        Run the simulation and convert its output.

        Returns:
            Tuple of (run uuid, model output dictionary)

        Raises:
            RuntimeError: If the binary is not set up or exits with an error
        """
        if not self.setup_complete:
            raise RuntimeError("CovidSim not set up. Call setup() first.")
        if self.parameters_path is None:
            self.prepare_inputs()

        cmd = self.build_command()
        logger.info("CovidSim args: %s", cmd[1:])

        result = subprocess.run(cmd, capture_output=True, text=True)

        log_file = os.path.join(self.log_dir, LOG_FILENAME)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(result.stdout or "")
            f.write(result.stderr or "")

        if result.returncode != 0:
            logger.error("CovidSim exited with code %s", result.returncode)
            raise RuntimeError(
                f"Model execution failed with return code {result.returncode}\n"
                f"STDERR: {result.stderr}\n"
                f"STDOUT: {result.stdout}"
            )

        # Keep a copy of every input alongside the run
        density_copy = os.path.join(
            self.input_dir, os.path.basename(self.region_files.population_density_file)
        )
        if not os.path.exists(density_copy):
            shutil.copyfile(self.region_files.population_density_file, density_copy)

        severity_path = os.path.join(self.output_dir, SEVERITY_OUTPUT_FILENAME)
        with open(severity_path, "r", encoding="utf-8") as f:
            output = convert_output(self.model_input, f.read(), t0=self.day0)

        output_path = os.path.join(self.output_dir, OUTPUT_FILENAME)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(output, f)

        logger.info("Finished CovidSim run %s", self.uuid)
        return self.uuid, output
