"""
Configuration management: models, loading, and validation.

Handles:
- AppConfig: snapshot locations and logging settings
- YAML loading (configs/taxonomy.yaml)
- Environment variable overrides

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_app_config, parse_app_config
from infrastructure.config.models import AppConfig, LoggingConfig, SnapshotConfig

__all__ = [
    # Main config (most commonly used)
    "AppConfig",
    "load_app_config",
    "parse_app_config",
    # Sections
    "SnapshotConfig",
    "LoggingConfig",
]
