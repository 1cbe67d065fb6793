"""Validation of raw token limit configuration."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .budget import LimitParseError, LimitParser
from .data import DEFAULT_MODEL
from .models import ModelRegistry, get_default_registry


@dataclass
class ValidationError:
    """A configuration problem and the field it was found at."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"*{self.path}*: {self.message}"


@dataclass
class ValidationResult:
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def format_errors(self) -> str:
        """Render all errors as one message, fields wrapped in asterisks."""
        return ". ".join(str(error) for error in self.errors)


class ConfigValidator:
    """Checks a raw configuration before any check runs."""

    def __init__(self, registry: Optional[ModelRegistry] = None):
        self.registry = registry or get_default_registry()
        self.limit_parser = LimitParser(self.registry)

    def validate(self, config: Any) -> ValidationResult:
        """Validate a list of raw check mappings.

        Args:
            config: Configuration as loaded from file or built from CLI args

        Returns:
            ValidationResult listing every problem found
        """
        result = ValidationResult()
        errors = result.errors

        if not isinstance(config, list):
            errors.append(
                ValidationError("root", "Configuration must be an array of check objects")
            )
            return result

        if not config:
            errors.append(
                ValidationError("root", "Configuration is empty - no checks will be performed")
            )

        for index, check in enumerate(config):
            self._validate_check(check, f"checks[{index}]", errors)

        names = [
            check.get("name")
            for check in config
            if isinstance(check, dict) and check.get("name")
        ]
        duplicates = [name for index, name in enumerate(names) if name in names[:index]]
        if duplicates:
            errors.append(
                ValidationError(
                    "checks", f"Duplicate check names found: {', '.join(duplicates)}"
                )
            )

        return result

    def _validate_check(
        self, check: Any, base_path: str, errors: List[ValidationError]
    ) -> None:
        if not isinstance(check, dict):
            errors.append(ValidationError(base_path, "Check must be an object"))
            return

        if check.get("path") is None:
            errors.append(
                ValidationError(f"{base_path}.path", "Path is required for each check")
            )
        else:
            self._validate_path(check["path"], f"{base_path}.path", errors)

        model = check.get("model")
        if model is not None:
            self._validate_model(model, f"{base_path}.model", errors)

        if check.get("limit") is not None:
            self._validate_limit(
                check["limit"], model or DEFAULT_MODEL, f"{base_path}.limit", errors
            )

        threshold_key = "warnThreshold" if "warnThreshold" in check else "warn_threshold"
        if threshold_key in check:
            self._validate_threshold(
                check[threshold_key], f"{base_path}.{threshold_key}", errors
            )

    def _validate_path(self, path: Any, field_path: str, errors: List[ValidationError]) -> None:
        if isinstance(path, str):
            if not path.strip():
                errors.append(ValidationError(field_path, "Path cannot be empty"))
            return

        if not isinstance(path, list):
            errors.append(
                ValidationError(field_path, "Path must be a string or array of strings")
            )
            return

        if not path:
            errors.append(ValidationError(field_path, "Path array cannot be empty"))

        for index, element in enumerate(path):
            if not isinstance(element, str):
                errors.append(
                    ValidationError(
                        f"{field_path}[{index}]", "All path elements must be strings"
                    )
                )
            elif not element.strip():
                errors.append(
                    ValidationError(f"{field_path}[{index}]", "Path element cannot be empty")
                )

    def _validate_model(self, model: Any, field_path: str, errors: List[ValidationError]) -> None:
        if isinstance(model, str) and self.registry.get_model_config(model) is not None:
            return
        known = ", ".join(self.registry.get_available_models())
        errors.append(
            ValidationError(field_path, f'Unknown model "{model}". Known models: {known}')
        )

    def _validate_limit(
        self, limit: Any, model: str, field_path: str, errors: List[ValidationError]
    ) -> None:
        if isinstance(limit, (int, float)) and not isinstance(limit, bool) and limit <= 0:
            errors.append(ValidationError(field_path, "Numeric limit must be positive"))
            return

        try:
            self.limit_parser.parse_limit(limit, model)
        except LimitParseError as e:
            errors.append(ValidationError(field_path, str(e).rstrip(".")))

    def _validate_threshold(
        self, threshold: Any, field_path: str, errors: List[ValidationError]
    ) -> None:
        if (
            isinstance(threshold, bool)
            or not isinstance(threshold, (int, float))
            or not 0 <= threshold <= 1
        ):
            errors.append(
                ValidationError(field_path, "Warning threshold must be a number from 0 to 1")
            )


def validate_config(config: Any, registry: Optional[ModelRegistry] = None) -> ValidationResult:
    """Validate a raw token limit configuration.

    This is a convenience function that creates a ConfigValidator instance
    and calls the validate method.
    """
    validator = ConfigValidator(registry)
    return validator.validate(config)
