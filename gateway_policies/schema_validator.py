"""
JSON Schema validation for policy config documents.

A policy config document looks like:

    {"policies": [
        {"type": "add_header", "flow": "request",
         "header_name": "X-Gateway", "header_value": "api-platform"},
        {"type": "interceptor", "flow": "response",
         "service_url": "http://localhost:9000/intercept", "timeout": 5}
    ]}

The schema checks structure only. Value checks (empty names, non-positive
timeouts) are left to each policy's validate().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator

from gateway_policies.exceptions import ConfigError

logger = logging.getLogger(__name__)


POLICY_CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["policies"],
    "additionalProperties": False,
    "properties": {
        "policies": {
            "type": "array",
            "items": {"$ref": "#/$defs/policy"},
        },
    },
    "$defs": {
        "flow": {"enum": ["request", "response", "fault", ""]},
        "policy": {
            "type": "object",
            "required": ["type"],
            "additionalProperties": False,
            "properties": {
                "type": {"enum": ["add_header", "remove_header", "interceptor"]},
                "flow": {"$ref": "#/$defs/flow"},
                "header_name": {"type": "string"},
                "header_value": {"type": "string"},
                "service_url": {"type": "string"},
                "timeout": {"type": "number"},
            },
            "allOf": [
                {
                    "if": {"properties": {"type": {"const": "add_header"}}},
                    "then": {"required": ["header_name", "header_value"]},
                },
                {
                    "if": {"properties": {"type": {"const": "remove_header"}}},
                    "then": {"required": ["header_name"]},
                },
                {
                    "if": {"properties": {"type": {"const": "interceptor"}}},
                    "then": {"required": ["service_url"]},
                },
            ],
        },
    },
}


@dataclass
class ValidationResult:
    """Result of schema validation."""

    valid: bool
    errors: list[str]

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(valid=True, errors=[])

    @classmethod
    def failure(cls, errors: list[str]) -> ValidationResult:
        return cls(valid=False, errors=errors)


class SchemaValidator:
    """Validates policy config documents against POLICY_CONFIG_SCHEMA."""

    _validator = Draft202012Validator(POLICY_CONFIG_SCHEMA)

    @classmethod
    def validate(cls, data: Any, context: str = "") -> ValidationResult:
        """
        Validate a policy config document.

        Args:
            data: The decoded document
            context: Optional context string for error messages (e.g., file name)

        Returns:
            ValidationResult with valid=True if valid, or valid=False with error messages
        """
        errors: list[str] = []
        for error in sorted(cls._validator.iter_errors(data), key=lambda e: [str(p) for p in e.path]):
            path = ".".join(str(p) for p in error.path) or "(root)"
            prefix = f"{context}: " if context else ""
            errors.append(f"{prefix}{path}: {error.message}")

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success()


def validate_policy_config(data: Any, context: str = "") -> None:
    """
    Validate a policy config document.

    Raises:
        ConfigError: Listing every schema violation
    """
    result = SchemaValidator.validate(data, context)
    if not result.valid:
        for error in result.errors:
            logger.warning(f"Policy config validation error: {error}")
        error_msg = "\n".join(result.errors)
        raise ConfigError(f"Schema validation failed:\n{error_msg}")
