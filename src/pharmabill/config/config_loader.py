"""
Configuration Loader
Loads pharmabill configuration from various sources
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pydantic

from pharmabill.config.pharmabill_config import (
    PharmabillConfig,
    PartialPharmabillConfig,
    ENV_VAR_MAPPING,
)
from pharmabill.config.config_validator import ConfigValidator
from pharmabill.exceptions import ConfigError, PharmabillError


class ConfigLoader:
    """
    ConfigLoader class
    Provides multiple ways to load and merge configuration
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a JSON file

        Args:
            path: Path to JSON configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            PharmabillError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise PharmabillError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise PharmabillError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR",
                cause=e,
            ) from e

        if not isinstance(config, dict):
            raise PharmabillError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )
        return self._process_relative_paths(config, file_path.parent)

    def from_environment(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables

        Values are coerced to the field types (``"60000"`` -> 60000,
        ``"yes"`` -> True).

        Returns:
            Configuration dictionary from environment variables

        Raises:
            ConfigError: If a variable cannot be coerced to its field type
        """
        raw: Dict[str, Any] = {}

        for env_var, config_key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                raw[config_key] = value

        try:
            partial = PartialPharmabillConfig(**raw)
        except pydantic.ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise ConfigError(
                f"Invalid environment configuration for: {fields}",
                code="CONFIG_ENV_ERROR",
                details={"fields": fields},
            ) from e

        return partial.model_dump(exclude_none=True)

    def from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Load configuration from a dictionary

        Args:
            config: Configuration dictionary

        Returns:
            Copy of configuration dictionary
        """
        return config.copy()

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration sources
        Priority: later sources override earlier sources

        Args:
            sources: Configuration dictionaries in order of increasing priority

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            filtered = self._filter_none(source)
            merged.update(filtered)

        return merged

    def resolve(self, config: Dict[str, Any]) -> PharmabillConfig:
        """
        Resolve configuration with defaults and validation

        Args:
            config: Partial configuration dictionary

        Returns:
            Fully resolved PharmabillConfig object

        Raises:
            ValidationError: If configuration is invalid
        """
        self._validator.validate_or_raise(config)

        # Pydantic fills in the defaults
        return PharmabillConfig(**config)

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Dict[str, Any]] = None,
    ) -> PharmabillConfig:
        """
        Load, merge, and resolve configuration from multiple sources

        Args:
            file: Path to JSON configuration file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic configuration dictionary (optional)

        Returns:
            Fully resolved PharmabillConfig object
        """
        sources: list[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(config)

        merged = self.merge(*sources)
        return self.resolve(merged)

    def create_template(self, path: Union[str, Path]) -> None:
        """
        Create a configuration template file

        Args:
            path: Path to write template
        """
        template = {
            "api_base_url": "http://localhost:5000/api",
            "api_token": "",
            "timeout": 30000,
            "retry_attempts": 3,
            "retry_delay": 1000,
            "enable_audit_log": True,
            "audit_log_path": "./logs/audit.log",
            "default_tax_rate": 0,
            "low_stock_threshold": 5,
            "expiry_warning_days": 30,
            "min_invoice_rows": 5,
            "invoice_output_dir": "./invoices",
            "store_name": "YOUR STORE NAME",
            "store_address": "YOUR STORE ADDRESS",
            "store_phone": "+91-0000000000",
            "store_alt_phone": "",
            "store_gst_number": "",
            "manager_name": "Store Manager",
        }

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)

    def _process_relative_paths(
        self, config: Dict[str, Any], base_path: Path
    ) -> Dict[str, Any]:
        """Resolve output paths relative to the config file"""
        processed = config.copy()

        for key in ("audit_log_path", "invoice_output_dir"):
            value = processed.get(key)
            if isinstance(value, str) and value:
                value_path = Path(value)
                if not value_path.is_absolute():
                    processed[key] = str(base_path / value_path)

        return processed

    def _filter_none(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Filter out None values from config dictionary"""
        return {k: v for k, v in config.items() if v is not None}
