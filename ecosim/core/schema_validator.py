"""Schema validation utilities for simulation plugin parameters."""

from __future__ import annotations

import warnings
from typing import Any, Mapping


class SchemaValidationError(ValueError):
    """Raised when simulation params fail schema validation."""


def _matches(value: Any, expected_type: type[Any]) -> bool:
    # bool is an int subclass; never let True pass as a grid size.
    if expected_type is float:
        return type(value) in (float, int)
    return type(value) is expected_type


def _check_constraint(key: str, value: Any, constraint: str) -> None:
    if constraint == "positive" and not value > 0:
        raise SchemaValidationError(f"Parameter '{key}' must be positive, got {value}.")
    if constraint == "non_negative" and not value >= 0:
        raise SchemaValidationError(f"Parameter '{key}' must be non-negative, got {value}.")
    if constraint == "probability" and not 0.0 <= value <= 1.0:
        raise SchemaValidationError(f"Parameter '{key}' must be within [0, 1], got {value}.")


def validate_simulation_params(
    params: dict[str, Any],
    schema_module: Any,
    simulation_name: str,
    strict: bool = True,
) -> dict[str, Any]:
    """Validate simulation params against plugin schema.

    Applies defaults, checks required fields and types, coerces ints given for
    float fields, enforces ``CONSTRAINTS`` and treats unknown parameters as
    warnings or errors depending on ``strict``.
    """
    required: Mapping[str, type[Any]] = getattr(schema_module, "REQUIRED_PARAMS", {})
    defaults: Mapping[str, Any] = getattr(schema_module, "DEFAULTS", {})
    optional: Mapping[str, type[Any]] = getattr(schema_module, "OPTIONAL_PARAMS", {})
    constraints: Mapping[str, str] = getattr(schema_module, "CONSTRAINTS", {})

    if not all(isinstance(table, Mapping) for table in (required, defaults, optional, constraints)):
        raise SchemaValidationError(
            f"Simulation '{simulation_name}' schema must define REQUIRED_PARAMS, DEFAULTS, OPTIONAL_PARAMS mappings."
        )

    merged = dict(defaults)
    merged.update(params)

    for key in required:
        if key not in merged:
            raise SchemaValidationError(
                f"Simulation '{simulation_name}' missing required parameter '{key}'."
            )

    typed = {**optional, **required}
    for key, expected_type in typed.items():
        if key not in merged:
            continue
        if not _matches(merged[key], expected_type):
            raise SchemaValidationError(
                f"Parameter '{key}' expected {expected_type.__name__}, got {type(merged[key]).__name__}."
            )
        if expected_type is float:
            merged[key] = float(merged[key])

    for key, constraint in constraints.items():
        if key in merged:
            _check_constraint(key, merged[key], constraint)

    allowed = set(required) | set(optional) | set(defaults)
    extras = [key for key in merged if key not in allowed]
    if extras:
        message = f"Unknown parameter(s) {extras} for simulation '{simulation_name}'."
        if strict:
            raise SchemaValidationError(message)
        warnings.warn(message, stacklevel=2)

    return merged
