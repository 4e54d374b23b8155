"""
Validation of the solution mapping before anything is uploaded.

A solution maps each configured data set name to the path of its output
file, plus the mandatory `sources` key pointing at the sources archive.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from hashcode_upload.errors import ValidationError

SOURCES_KEY = "sources"
MIN_KEYS = 2


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_solution(solution: Any, data_sets: Mapping[str, str]) -> ValidationResult:
    """Check a candidate solution and collect every violated constraint."""
    result = ValidationResult()
    if not isinstance(solution, Mapping):
        result.errors.append(f"solution must be a mapping, got {type(solution).__name__}")
        return result

    if len(solution) < MIN_KEYS:
        result.errors.append(f"solution must have at least {MIN_KEYS} keys, got {len(solution)}")
    if SOURCES_KEY not in solution:
        result.errors.append(f"'{SOURCES_KEY}' is required")

    for key, value in solution.items():
        if key != SOURCES_KEY and key not in data_sets:
            result.errors.append(f"'{key}' is not allowed")
        elif not isinstance(value, str) or not value:
            result.errors.append(f"'{key}' must be a non-empty string path, got {value!r}")
    return result


def attempt(solution: Any, data_sets: Mapping[str, str], message: str = "invalid solution parameters") -> dict[str, str]:
    """Return a copy of the solution if it is valid, raise ValidationError otherwise."""
    result = validate_solution(solution, data_sets)
    if not result.ok:
        raise ValidationError(message, result.errors)
    return dict(solution)
