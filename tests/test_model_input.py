"""
Tests for model input records
"""

import json
import os

import pytest

from covidsim_python import Intensity, InterventionPeriod, ModelInput, ModelParameters


class TestModelInput:
    """Test cases for ModelInput and its parts"""

    def test_from_dict(self, four_period_model_input):
        model_input = ModelInput.from_dict(four_period_model_input)
        assert model_input.region == "US"
        assert model_input.subregion == "US-AK"
        assert model_input.parameters.calibration_death_count == 120
        assert model_input.parameters.r0 == 2.5
        assert len(model_input.parameters.intervention_periods) == 4

    def test_intensities_are_enums(self, four_period_model_input):
        model_input = ModelInput.from_dict(four_period_model_input)
        first = model_input.parameters.intervention_periods[0]
        assert first.case_isolation is Intensity.MODERATE
        assert first.social_distancing is Intensity.MILD
        assert first.school_closure is None
        assert first.voluntary_home_quarantine is None

    def test_from_json(self, test_model_input_json):
        model_input = ModelInput.from_json(str(test_model_input_json))
        assert model_input.region == "US"
        periods = model_input.parameters.intervention_periods
        assert [p.start_date for p in periods] == [
            "2020-03-01",
            "2020-03-10",
            "2020-03-20",
            "2020-03-30",
        ]
        assert periods[0].reduction_population_contact == 9

    def test_from_json_request_wrapper(self, four_period_model_input, temp_dir):
        """Test loading a runner request that wraps the model input"""
        path = os.path.join(temp_dir, "request.json")
        with open(path, "w") as f:
            json.dump(
                {
                    "id": 17,
                    "callbackURL": "http://localhost/result",
                    "configuration": four_period_model_input,
                },
                f,
            )
        model_input = ModelInput.from_json(path)
        assert model_input.subregion == "US-AK"

    def test_to_dict_round_trip(self, test_model_input_json):
        with open(test_model_input_json) as f:
            data = json.load(f)
        assert ModelInput.from_dict(data).to_dict() == data

    def test_optional_fields(self):
        parameters = ModelParameters.from_dict({"calibrationDate": "2020-03-20"})
        assert parameters.r0 is None
        assert parameters.intervention_periods == []
        assert parameters.calibration_death_count == 0

    def test_numeric_intervention_level(self):
        period = InterventionPeriod.from_dict({"startDate": "2020-03-01", "schoolClosure": 35})
        assert period.school_closure == 35.0
        assert period.to_dict() == {"startDate": "2020-03-01", "schoolClosure": 35.0}

    def test_invalid_intensity(self):
        with pytest.raises(ValueError, match="Invalid intervention intensity"):
            InterventionPeriod.from_dict({"startDate": "2020-03-01", "caseIsolation": "extreme"})

    def test_missing_start_date(self):
        with pytest.raises(KeyError):
            InterventionPeriod.from_dict({"caseIsolation": "mild"})
