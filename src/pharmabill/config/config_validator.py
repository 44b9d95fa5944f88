"""
Configuration Validator
Validates pharmabill configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


# (field, minimum, maximum, unit); maximum None means unbounded
_RANGES = [
    ("timeout", 1000, 300000, "ms"),
    ("retry_attempts", 0, 10, ""),
    ("retry_delay", 1, 60000, "ms"),
    ("default_tax_rate", 0, 100, "%"),
    ("low_stock_threshold", 0, None, ""),
    ("expiry_warning_days", 0, None, " days"),
    ("min_invoice_rows", 0, 50, ""),
]

_INTEGER_FIELDS = {
    "retry_attempts",
    "low_stock_threshold",
    "expiry_warning_days",
    "min_invoice_rows",
}


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for pharmabill configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_formats(config)
        self._validate_ranges(config)
        self._validate_store(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValidationError: If configuration is invalid
        """
        from pharmabill.exceptions import ValidationError

        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                field=result.errors[0].field,
            )

    def _validate_formats(self, config: Dict[str, Any]) -> None:
        """Validate field formats"""
        base_url = config.get("api_base_url")
        if base_url is not None and base_url != "":
            if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field="api_base_url",
                    message="api_base_url must be a valid HTTP/HTTPS URL",
                    value=base_url
                ))

        for path_field in ["audit_log_path", "invoice_output_dir"]:
            path_value = config.get(path_field)
            if path_value is not None and path_value != "":
                if not isinstance(path_value, str):
                    self._errors.append(ValidationErrorDetail(
                        field=path_field,
                        message=f"{path_field} must be a string",
                        value=path_value
                    ))

        enable_audit_log = config.get("enable_audit_log")
        if enable_audit_log is not None and not isinstance(enable_audit_log, bool):
            self._errors.append(ValidationErrorDetail(
                field="enable_audit_log",
                message="enable_audit_log must be a boolean",
                value=enable_audit_log
            ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        for field_name, low, high, unit in _RANGES:
            value = config.get(field_name)
            if value is None:
                continue

            is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
            if field_name in _INTEGER_FIELDS:
                is_number = isinstance(value, int) and not isinstance(value, bool)

            if not is_number:
                kind = "an integer" if field_name in _INTEGER_FIELDS else "a number"
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} must be {kind}",
                    value=value
                ))
            elif value < low:
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} should be at least {low}{unit}",
                    value=value
                ))
            elif high is not None and value > high:
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} should not exceed {high}{unit}",
                    value=value
                ))

    def _validate_store(self, config: Dict[str, Any]) -> None:
        """Validate store profile fields"""
        store_name = config.get("store_name")
        if store_name is not None:
            if not isinstance(store_name, str) or store_name.strip() == "":
                self._errors.append(ValidationErrorDetail(
                    field="store_name",
                    message="store_name cannot be empty",
                    value=store_name
                ))

        gst_number = config.get("store_gst_number")
        if gst_number:
            # GSTIN is 15 alphanumeric characters
            if not isinstance(gst_number, str) or len(gst_number) != 15 or not gst_number.isalnum():
                self._errors.append(ValidationErrorDetail(
                    field="store_gst_number",
                    message="store_gst_number must be a 15 character GSTIN",
                    value=gst_number
                ))
