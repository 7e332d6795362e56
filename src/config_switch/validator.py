"""Structural validation of configuration documents.

Two document shapes are supported, selected by ``SchemaMode``:

- ``aggregate``: ``{"<name>": {"<VAR>": "<string>", ...}, ...}``
- ``single``: a full settings document with a required ``env`` object

Malformed input never raises; it comes back as an invalid
``ValidationResult``.
"""

from pathlib import Path
from typing import Any, List

from .exceptions import FileAccessError
from .file_ops import parse_json, read_text
from .models import SchemaMode, ValidationResult

REQUIRED_ENV_KEYS = ("ANTHROPIC_API_KEY", "ANTHROPIC_BASE_URL")
OPTIONAL_ENV_KEYS = ("ANTHROPIC_MODEL",)

NUMERIC_FIELDS = ("timeout", "temperature", "maxTokens")
OBJECT_FIELDS = ("proxy",)

TEMPERATURE_RANGE = (0.0, 1.0)
MAX_TOKENS_ADVISORY = 100_000

NOT_AN_OBJECT = "configuration must be a valid JSON object"
EMPTY_AGGREGATE = "configuration is empty, no entries defined"
NO_ENV_SET = "no env configuration currently set"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _result(errors: List[str], warnings: List[str], data: Any = None) -> ValidationResult:
    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        data=data,
    )


class Validator:
    """Stateless validation helpers."""

    @staticmethod
    def validate_json_string(text: str) -> ValidationResult:
        """Strict JSON parse. The parser's own message is the error text."""
        try:
            data = parse_json(text)
        except ValueError as e:
            return ValidationResult(is_valid=False, errors=(str(e),))
        return ValidationResult(is_valid=True, data=data)

    @staticmethod
    def validate_json_file(path: Path) -> ValidationResult:
        """Read ``path`` and validate it as JSON. Read failures are results too."""
        try:
            text = read_text(Path(path))
        except FileAccessError as e:
            return ValidationResult(
                is_valid=False,
                errors=(f"cannot read file {path}: {e.reason}",),
            )
        return Validator.validate_json_string(text)

    @staticmethod
    def validate_document(doc: Any, schema_mode: SchemaMode) -> ValidationResult:
        """Check ``doc`` against one of the supported document shapes."""
        if SchemaMode(schema_mode) is SchemaMode.AGGREGATE:
            return Validator._validate_aggregate(doc)
        return Validator._validate_single(doc)

    @staticmethod
    def _validate_aggregate(doc: Any) -> ValidationResult:
        if not isinstance(doc, dict):
            return _result([NOT_AN_OBJECT], [])

        if not doc:
            return _result([], [EMPTY_AGGREGATE])

        errors = []
        for name, env in doc.items():
            if not isinstance(env, dict):
                errors.append(f'entry "{name}" must be an object')
                continue
            for key, value in env.items():
                if not isinstance(value, str):
                    errors.append(f'entry "{name}" variable "{key}" must be a string')

        return _result(errors, [])

    @staticmethod
    def _validate_single(doc: Any) -> ValidationResult:
        if not isinstance(doc, dict):
            return _result([NOT_AN_OBJECT], [])

        errors = []
        env = doc.get("env")
        if "env" not in doc:
            errors.append("missing required field: env")
        elif not isinstance(env, dict):
            errors.append("env must be an object")
        else:
            for key in REQUIRED_ENV_KEYS:
                if key not in env:
                    errors.append(f"missing required field: env.{key}")
                elif not isinstance(env[key], str):
                    errors.append(f"env.{key} must be a string")
            for key in OPTIONAL_ENV_KEYS:
                if key in env and not isinstance(env[key], str):
                    errors.append(f"env.{key} must be a string")

        for name in NUMERIC_FIELDS:
            if name in doc and not _is_number(doc[name]):
                errors.append(f"{name} must be a number")
        for name in OBJECT_FIELDS:
            if name in doc and not isinstance(doc[name], dict):
                errors.append(f"{name} must be an object")

        return _result(errors, Validator.check_warnings(doc))

    @staticmethod
    def check_warnings(doc: dict) -> List[str]:
        """Advisory checks on a single document. Never affect validity."""
        warnings = []

        temperature = doc.get("temperature")
        low, high = TEMPERATURE_RANGE
        if _is_number(temperature) and not low <= temperature <= high:
            warnings.append("temperature should be between 0 and 1")

        max_tokens = doc.get("maxTokens")
        if _is_number(max_tokens) and max_tokens > MAX_TOKENS_ADVISORY:
            warnings.append("maxTokens is very large and may incur high costs")

        return warnings

    @staticmethod
    def validate_env_section(env: Any) -> ValidationResult:
        """Validate just the ``env`` mapping of a settings document."""
        if env is None:
            return _result([], [NO_ENV_SET])

        if not isinstance(env, dict):
            return _result(["env must be an object"], [])

        errors = [
            f'env variable "{key}" must be a string'
            for key, value in env.items()
            if not isinstance(value, str)
        ]
        return _result(errors, [])

    @staticmethod
    def validate_config_file(path: Path, schema_mode: SchemaMode) -> ValidationResult:
        """JSON validation followed by schema validation; carries the parsed data."""
        parsed = Validator.validate_json_file(path)
        if not parsed.is_valid:
            return parsed

        checked = Validator.validate_document(parsed.data, schema_mode)
        return _result(list(checked.errors), list(checked.warnings), data=parsed.data)

    @staticmethod
    def generate_report(result: ValidationResult) -> str:
        """Human-readable rendering; stable so tests can assert on it."""
        lines = []

        if result.is_valid:
            lines.append("✅ Validation passed")
        else:
            lines.append("❌ Validation failed")
            lines.extend(f"  - Error: {error}" for error in result.errors)

        if result.warnings:
            lines.append("")
            lines.append("⚠️  Warnings")
            lines.extend(f"  - Warning: {warning}" for warning in result.warnings)

        return "\n".join(lines) + "\n"
