"""
JSON Schema Validator for CovidSim Model Input

This module provides JSON schema validation of generalized model input.
The schema template is loaded and the intervention intensity levels are
populated from the Intensity enumeration, so the schema always accepts
exactly the levels the parameter translation understands.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import ValidationError

from .model_input import Intensity

logger = logging.getLogger(__name__)


class SchemaValidator:
    """
    JSON schema validator for CovidSim model input.

    This class loads a schema template and generates the schema with the
    supported intensity levels filled in.
    """

    def __init__(self, schema_template_path: Optional[str] = None):
        """
        Initialize the schema validator.

        Args:
            schema_template_path: Path to the schema template JSON file.
                                If None, uses the template shipped with the package.
        """
        if schema_template_path is None:
            schema_template_path = os.path.join(
                os.path.dirname(__file__), "model_input_schema_template.json"
            )

        self.schema_template_path = os.path.abspath(schema_template_path)
        self._load_template()

    def _load_template(self):
        """Load the schema template from file."""
        try:
            with open(self.schema_template_path, "r", encoding="utf-8") as f:
                self.schema_template = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(
                f"Schema template not found at: {self.schema_template_path}"
            )
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in schema template: {e}")

    def generate_schema(self, intensity_levels: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Generate a complete schema with the given intensity levels.

        Args:
            intensity_levels: Accepted intensity names (default: every
                              Intensity value)

        Returns:
            Complete JSON schema with resolved intensity levels
        """
        if intensity_levels is None:
            intensity_levels = [level.value for level in Intensity]
        if not intensity_levels:
            raise ValueError("At least one intensity level is required")

        # Convert template to string, replace placeholders, then parse back
        schema_str = json.dumps(self.schema_template, indent=2)
        schema_str = schema_str.replace(
            '"{INTENSITY_LEVELS}"', json.dumps(list(intensity_levels))
        )

        return json.loads(schema_str)

    def validate(self, model_input: Dict[str, Any], verbose: bool = True) -> List[str]:
        """
        Validate model input against the schema.

        Args:
            model_input: Model input dictionary to validate
            verbose: Whether to log detailed error messages

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        try:
            schema = self.generate_schema()
            jsonschema.validate(model_input, schema)
            errors.extend(self._check_period_order(model_input))

            if verbose and not errors:
                periods = model_input["parameters"]["interventionPeriods"]
                logger.info(
                    "JSON Schema validation passed (%d intervention periods)",
                    len(periods),
                )

        except ValidationError as e:
            errors.append(self._format_validation_error(e))

        except Exception as e:
            errors.append(f"Schema validation error: {str(e)}")

        if verbose:
            for error_msg in errors:
                logger.error("JSON Schema validation failed: %s", error_msg)

        return errors

    def _check_period_order(self, model_input: Dict[str, Any]) -> List[str]:
        """
        Check that intervention periods are in ascending start date order.

        Args:
            model_input: Model input dictionary that already passed the schema

        Returns:
            Error messages for every period that starts before its predecessor
        """
        periods = model_input["parameters"]["interventionPeriods"]
        errors = []
        for i in range(1, len(periods)):
            previous = periods[i - 1]["startDate"]
            current = periods[i]["startDate"]
            if current < previous:
                errors.append(
                    f"Validation error at 'parameters.interventionPeriods.{i}.startDate': "
                    f"{current} is before the previous period's start date {previous}"
                )
        return errors

    def _format_validation_error(self, error: ValidationError) -> str:
        """
        Format a JSON schema validation error into a readable message.

        Args:
            error: ValidationError from jsonschema

        Returns:
            Formatted error message
        """
        if error.absolute_path:
            path = ".".join(str(p) for p in error.absolute_path)
            return f"Validation error at '{path}': {error.message}"
        else:
            return f"Validation error: {error.message}"


class ModelInputSchemaValidator:
    """
    Convenience wrapper for model input schema validation.
    """

    def __init__(self):
        self.validator = SchemaValidator()

    def validate_input(self, model_input: Dict[str, Any], verbose: bool = True) -> bool:
        """
        Validate model input and raise exception if invalid.

        Args:
            model_input: Model input dictionary
            verbose: Whether to log validation messages

        Returns:
            True if valid

        Raises:
            ValueError: If validation fails
        """
        errors = self.validator.validate(model_input, verbose)

        if errors:
            error_msg = f"Model input validation failed with {len(errors)} error(s):\n"
            for i, err in enumerate(errors, 1):
                error_msg += f"  {i}. {err}\n"
            raise ValueError(error_msg.strip())

        return True

    def validate_input_safe(self, model_input: Dict[str, Any], verbose: bool = True) -> tuple[bool, List[str]]:
        """
        Validate model input without raising exceptions.

        Args:
            model_input: Model input dictionary
            verbose: Whether to log validation messages

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = self.validator.validate(model_input, verbose)
        return len(errors) == 0, errors

    def get_schema(self) -> Dict[str, Any]:
        """
        Generate the complete model input schema.

        Returns:
            Complete JSON schema
        """
        return self.validator.generate_schema()


def validate_model_input(model_input: Dict[str, Any], verbose: bool = True) -> bool:
    """
    Validate model input using JSON schema.

    Args:
        model_input: Model input dictionary
        verbose: Whether to log validation messages

    Returns:
        True if valid

    Raises:
        ValueError: If validation fails
    """
    validator = ModelInputSchemaValidator()
    return validator.validate_input(model_input, verbose)


def validate_model_input_safe(model_input: Dict[str, Any], verbose: bool = True) -> tuple[bool, List[str]]:
    """
    Validate model input without raising exceptions.

    Args:
        model_input: Model input dictionary
        verbose: Whether to log validation messages

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    validator = ModelInputSchemaValidator()
    return validator.validate_input_safe(model_input, verbose)
