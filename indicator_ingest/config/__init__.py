"""YAML configuration for the upload validator."""

from .loader import ConfigError, UploadConfig, load_config

__all__ = [
    "ConfigError",
    "UploadConfig",
    "load_config",
]
