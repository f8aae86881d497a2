"""Configuration loading from YAML files."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from infrastructure.config.models import AppConfig, LoggingConfig, SnapshotConfig
from infrastructure.constants import ENV_DATA_DIR, ENV_ENCODING

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    block = data.get(key) or {}
    if not isinstance(block, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return dict(block)


def parse_app_config(data: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Build an AppConfig from a pre-loaded YAML dict plus environment overrides.

    This is a pure function - it does NOT perform file I/O.

    Overrides:
        TAXONOMY_DATA_DIR -> snapshot.data_dir
        TAXONOMY_ENCODING -> snapshot.encoding

    Raises:
        ValueError: if sections have the wrong type or values fail validation
    """
    env = os.environ if environ is None else environ

    snapshot = _section(data, "snapshot")
    logging_block = _section(data, "logging")

    if env.get(ENV_DATA_DIR):
        snapshot["data_dir"] = env[ENV_DATA_DIR]
        logger.debug("snapshot.data_dir overridden from %s", ENV_DATA_DIR)
    if env.get(ENV_ENCODING):
        snapshot["encoding"] = env[ENV_ENCODING]
        logger.debug("snapshot.encoding overridden from %s", ENV_ENCODING)

    try:
        return AppConfig(
            snapshot=SnapshotConfig(**snapshot),
            logging=LoggingConfig(**logging_block),
        )
    except ValidationError as e:
        raise ValueError(f"Invalid taxonomy configuration: {e}") from e


def load_app_config(path: Path, environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Load taxonomy.yaml and construct a fully-resolved AppConfig.

    This function handles file I/O, then delegates parsing to parse_app_config.
    """
    data = _load_yaml(path)
    cfg = parse_app_config(data, environ)
    logger.debug("Loaded config from %s: %s", path, cfg.model_dump(mode="json"))
    return cfg
