"""
Tests for environment driven configuration
"""

import importlib
import os

import pytest

from covidsim_python import config


@pytest.fixture
def reload_config(monkeypatch):
    """Reload the config module, restoring the original values afterwards"""
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults(monkeypatch, reload_config):
    for name in ["MODEL_OUTPUT_DIR", "COVIDSIM_THREAD_COUNT", "COVIDSIM_DAY0"]:
        monkeypatch.delenv(name, raising=False)
    reload_config()

    assert config.OUTPUT_DIR == os.path.join(os.getcwd(), "output")
    assert config.THREAD_COUNT == 8
    assert config.DAY0 == "2020-01-01"


def test_environment_overrides(monkeypatch, reload_config, temp_dir):
    monkeypatch.setenv("MODEL_RUNNER_LOG_DIR", os.path.join(temp_dir, "log"))
    monkeypatch.setenv("COVIDSIM_BIN_DIR", temp_dir)
    monkeypatch.setenv("COVIDSIM_THREAD_COUNT", "32")
    monkeypatch.setenv("COVIDSIM_DAY0", "2020-02-01")
    reload_config()

    assert config.LOG_DIR == os.path.join(temp_dir, "log")
    assert config.BIN_DIR == temp_dir
    assert config.THREAD_COUNT == 32
    assert config.DAY0 == "2020-02-01"


def test_setup_uses_bin_dir(monkeypatch, basic_covidsim_model, temp_dir):
    executable = os.path.join(temp_dir, "CovidSim")
    with open(executable, "w") as f:
        f.write("#!/bin/bash\n")
    monkeypatch.setattr(config, "BIN_DIR", temp_dir)

    basic_covidsim_model.setup()
    assert basic_covidsim_model.executable_path == executable
