"""Custom exceptions for configuration management."""

from cbr.errors import CbrError


class ConfigError(CbrError):
    """Raised when configuration data cannot be processed."""

    code = "config_error"
