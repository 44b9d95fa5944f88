"""
Configuration module
"""

from pharmabill.config.pharmabill_config import (
    PharmabillConfig,
    PartialPharmabillConfig,
    DEFAULT_API_BASE_URL,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from pharmabill.config.config_loader import ConfigLoader
from pharmabill.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "PharmabillConfig",
    "PartialPharmabillConfig",
    "DEFAULT_API_BASE_URL",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
