"""
Schema Validator Module
Validates configuration files and generated pathways against JSON schemas.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from jsonschema import Draft7Validator, FormatChecker, ValidationError
from pydantic import ValidationError as ModelValidationError

from pathfinder.models.config import AppSettings
from pathfinder.utils.errors import ConfigurationError, PathwayParseError

logger = structlog.get_logger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).parent.parent / "schemas"
PATHWAY_SCHEMA = "training_pathway_schema.json"
APP_SETTINGS_SCHEMA = "app_settings_schema.json"

# Keywords whose violations are tolerated in generated output. Closed
# enumerations may grow upstream; renderers fall back for unknown values.
TOLERATED_VALIDATORS = {"enum"}


class SchemaValidator:
    """Validates JSON documents against the bundled schemas."""

    def __init__(self, schema_dir: Optional[Path] = None):
        """
        Initialize validator with schema directory.

        Args:
            schema_dir: Path to directory containing JSON schemas
        """
        self.schema_dir = schema_dir or DEFAULT_SCHEMA_DIR
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from file.

        Args:
            schema_name: Schema filename (e.g., "training_pathway_schema.json")

        Returns:
            Loaded schema dictionary

        Raises:
            ConfigurationError: If schema file not found or invalid
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            logger.error(
                "schema_not_found",
                schema_name=schema_name,
                schema_path=str(schema_path),
            )
            raise ConfigurationError(f"Schema file not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("schema_invalid_json", schema_name=schema_name, error=str(e))
            raise ConfigurationError(
                f"Invalid JSON in schema {schema_name}: {e}"
            ) from e

        self._schemas[schema_name] = schema
        logger.debug("schema_loaded", schema_name=schema_name)
        return schema

    def schema_text(self, schema_name: str) -> str:
        """Return the schema serialized for embedding in a prompt."""
        return json.dumps(self.load_schema(schema_name), indent=2)

    def iter_errors(self, document: Any, schema_name: str) -> List[ValidationError]:
        schema = self.load_schema(schema_name)
        validator = Draft7Validator(schema, format_checker=FormatChecker())
        return sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path))

    def validate(self, config: Dict[str, Any], schema_name: str) -> None:
        """
        Validate configuration against schema.

        Args:
            config: Configuration dictionary to validate
            schema_name: Schema filename to validate against

        Raises:
            ConfigurationError: If validation fails with detailed error messages
        """
        errors = self.iter_errors(config, schema_name)
        if not errors:
            logger.debug("validation_passed", schema_name=schema_name)
            return

        logger.warning(
            "validation_failed", schema_name=schema_name, error_count=len(errors)
        )
        error_messages = self._format_validation_errors(errors, schema_name)
        raise ConfigurationError("\n".join(error_messages))

    def validate_file(self, config_path: Path, schema_name: str) -> Dict[str, Any]:
        """
        Load and validate a configuration file.

        Args:
            config_path: Path to configuration JSON file
            schema_name: Schema filename to validate against

        Returns:
            Validated configuration dictionary

        Raises:
            ConfigurationError: If file not found or validation fails
        """
        if not config_path.exists():
            logger.error("config_file_not_found", config_path=str(config_path))
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(
                "config_invalid_json", config_path=str(config_path), error=str(e)
            )
            raise ConfigurationError(
                f"Invalid JSON in {config_path.name}: {e}\n"
                f"Check for trailing commas, missing quotes, or invalid syntax."
            ) from e

        self.validate(config, schema_name)
        return config

    def validate_pathway(self, document: Any) -> List[str]:
        """
        Validate generated pathway JSON.

        Structural violations (missing keys, wrong types, empty pathway) are
        fatal. Closed-enumeration violations are returned as warnings.

        Args:
            document: Parsed JSON returned by the generation service

        Returns:
            Warning messages for tolerated violations

        Raises:
            PathwayParseError: If the document is structurally invalid
        """
        errors = self.iter_errors(document, PATHWAY_SCHEMA)
        fatal = [e for e in errors if e.validator not in TOLERATED_VALIDATORS]
        tolerated = [e for e in errors if e.validator in TOLERATED_VALIDATORS]

        if fatal:
            messages = self._format_validation_errors(fatal, PATHWAY_SCHEMA)
            logger.error(
                "pathway_structure_invalid",
                error_count=len(fatal),
                first_error=fatal[0].message[:200],
            )
            raise PathwayParseError("\n".join(messages))

        warnings = [
            f"{self._error_path(e)}: unexpected value {e.instance!r}" for e in tolerated
        ]
        for warning in warnings:
            logger.warning("pathway_enum_value_unknown", detail=warning)
        return warnings

    @staticmethod
    def _error_path(error: ValidationError) -> str:
        return " -> ".join([str(p) for p in error.absolute_path]) or "(root)"

    def _format_validation_errors(
        self, errors: List[ValidationError], schema_name: str
    ) -> List[str]:
        """
        Format validation errors into user-friendly messages.

        Args:
            errors: List of validation errors from jsonschema
            schema_name: Schema name for context

        Returns:
            List of formatted error messages
        """
        messages = [f"Validation failed for {schema_name}:"]

        for error in errors:
            path = self._error_path(error)

            if error.validator == "required":
                missing_field = error.message.split("'")[1]
                messages.append(f"  * Missing required field: '{missing_field}' at {path}")
            elif error.validator == "type":
                messages.append(
                    f"  * Type mismatch at '{path}': {error.message}\n"
                    f"    -> Expected type: {error.validator_value}"
                )
            elif error.validator in ("minLength", "minItems"):
                messages.append(f"  * Value too short at '{path}': {error.message}")
            elif error.validator == "format":
                messages.append(
                    f"  * Invalid format at '{path}': {error.message}\n"
                    f"    -> Expected format: {error.validator_value}"
                )
            elif error.validator in ("minimum", "exclusiveMinimum"):
                messages.append(f"  * Value too small at '{path}': {error.message}")
            elif error.validator == "maximum":
                messages.append(f"  * Value too large at '{path}': {error.message}")
            elif error.validator == "enum":
                messages.append(
                    f"  * Invalid value at '{path}': {error.message}\n"
                    f"    -> Allowed values: {error.validator_value}"
                )
            elif error.validator == "additionalProperties":
                messages.append(f"  * Unknown setting at '{path}': {error.message}")
            else:
                messages.append(f"  * Validation error at '{path}': {error.message}")

        return messages


def load_app_settings(
    config_path: Optional[Path] = None,
    validator: Optional[SchemaValidator] = None,
) -> AppSettings:
    """
    Load application settings, validating the file against its schema first.

    A missing file yields the defaults.

    Raises:
        ConfigurationError: If the file is invalid JSON, fails the schema, or
            fails model validation
    """
    config_path = Path(config_path) if config_path else Path("config/app_settings.json")
    if not config_path.exists():
        logger.debug("app_settings_defaults", config_path=str(config_path))
        return AppSettings()

    validator = validator or SchemaValidator()
    data = validator.validate_file(config_path, APP_SETTINGS_SCHEMA)
    try:
        return AppSettings(**data)
    except ModelValidationError as e:
        raise ConfigurationError(f"Invalid settings in {config_path}: {e}") from e
