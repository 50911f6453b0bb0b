"""
pytest configuration and fixtures for covidsim_python tests
"""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from covidsim_python.params_serialization import parse

from .test_helpers import TestHelpers, AssertionHelpers

# Test data directory
TEST_DATA_DIR = Path(__file__).parent / "fixtures"


class BaseTestCase:
    """Base test case class with common setup methods"""

    def setup_method(self):
        """Setup method called before each test method"""
        self.helpers = TestHelpers()
        self.assertions = AssertionHelpers()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def test_helpers():
    """Test helpers instance"""
    return TestHelpers()


@pytest.fixture
def assertion_helpers():
    """Assertion helpers instance"""
    return AssertionHelpers()


# Model input fixtures
@pytest.fixture
def test_model_input_json():
    """Path to test model input JSON file"""
    return TEST_DATA_DIR / "test_model_input.json"


@pytest.fixture
def four_period_model_input():
    """Model input with four periods of mixed interventions"""
    return TestHelpers.create_model_input(
        ["2020-03-01", "2020-03-10", "2020-03-20", "2020-03-30"],
        caseIsolation=["moderate", "aggressive", "aggressive", "moderate"],
        voluntaryHomeQuarantine=[None, "moderate", "moderate", "mild"],
        socialDistancing=["mild", "aggressive", "moderate", None],
        schoolClosure=[None, "aggressive", "mild", None],
    )


@pytest.fixture
def four_period_parameters(four_period_model_input):
    """ModelParameters for the four period model input"""
    from covidsim_python import ModelParameters

    return ModelParameters.from_dict(four_period_model_input["parameters"])


# Parameter template fixtures
@pytest.fixture
def pre_params_template_text():
    """Contents of the pre-parameter template"""
    return (TEST_DATA_DIR / "pre_params_template.txt").read_text()


@pytest.fixture
def params_template_text():
    """Contents of the parameter template"""
    return (TEST_DATA_DIR / "p_NoInt.txt").read_text()


@pytest.fixture
def admin_units_text():
    """Contents of the admin unit file"""
    return (TEST_DATA_DIR / "admin_units.txt").read_text()


@pytest.fixture
def params_template(params_template_text):
    """Parsed parameter template"""
    return parse(params_template_text)


@pytest.fixture
def admin_params(admin_units_text):
    """Parsed admin unit file"""
    return parse(admin_units_text)


@pytest.fixture
def severity_content():
    """Contents of a CovidSim severity output file"""
    return (TEST_DATA_DIR / "result.avNE.severity.xls").read_text()


# Mock fixtures
@pytest.fixture
def mock_subprocess_run():
    """Mock subprocess.run with success result"""
    mock_result = TestHelpers.create_mock_success_result()
    with patch("subprocess.run", return_value=mock_result) as mock_run:
        yield mock_run


@pytest.fixture
def mock_subprocess_run_failure():
    """Mock subprocess.run with failure result"""
    mock_result = TestHelpers.create_mock_failure_result()
    with patch("subprocess.run", return_value=mock_result) as mock_run:
        yield mock_run


# CovidSim model fixtures
@pytest.fixture
def instance_folder(temp_dir):
    """Create instance folder"""
    folder = Path(temp_dir) / "instances"
    folder.mkdir(exist_ok=True)
    return str(folder)


@pytest.fixture
def region_files(temp_dir):
    """Region files for a subregion that shares its country's admin file"""
    return TestHelpers.create_region_files(temp_dir)


@pytest.fixture
def basic_covidsim_model(four_period_model_input, temp_dir):
    """Basic CovidSim run instance"""
    return TestHelpers.setup_covidsim_model(four_period_model_input, temp_dir)


@pytest.fixture
def covidsim_model_with_executable(four_period_model_input, temp_dir):
    """CovidSim run set up with a dummy executable"""
    return TestHelpers.setup_covidsim_with_executable(four_period_model_input, temp_dir)


@pytest.fixture
def dummy_executable(temp_dir):
    """Create dummy executable file"""
    executable_path = Path(temp_dir) / "CovidSim"
    executable_path.write_text("#!/bin/bash\necho 'CovidSim'")
    executable_path.chmod(0o755)
    return str(executable_path)
