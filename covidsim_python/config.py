"""
Runtime configuration for the CovidSim runner.

Values are read from the environment once, at import time. Every consumer
also accepts the value as an explicit argument, so these only provide the
defaults.
"""

import os

# The path to a directory where log files should be written.
LOG_DIR = os.environ.get("MODEL_RUNNER_LOG_DIR", os.path.join(os.getcwd(), "log"))

# The path to a directory containing run-specific model input data files.
INPUT_DIR = os.environ.get("MODEL_INPUT_DIR", os.path.join(os.getcwd(), "input"))

# The path to a directory where output data files should be written.
OUTPUT_DIR = os.environ.get("MODEL_OUTPUT_DIR", os.path.join(os.getcwd(), "output"))

# The path to the static CovidSim data (admin units, populations, param files).
MODEL_DATA_DIR = os.environ.get("MODEL_DATA_DIR", os.path.join(os.getcwd(), "data"))

# The directory holding the CovidSim binary.
BIN_DIR = os.environ.get("COVIDSIM_BIN_DIR", os.path.join(os.getcwd(), "bin"))

THREAD_COUNT = int(os.environ.get("COVIDSIM_THREAD_COUNT", "8"))

# Reference date for every "day of year" parameter and output timestamp.
DAY0 = os.environ.get("COVIDSIM_DAY0", "2020-01-01")
