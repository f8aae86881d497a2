"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Snapshot files (row-based tree and tag registry format)
- Configuration loading (YAML, environment)
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import AppConfig, SnapshotConfig, load_app_config
from infrastructure.io import TaxonomySerializer

__all__ = [
    # Snapshot files (most commonly used)
    "TaxonomySerializer",
    # Configuration (most commonly used)
    "load_app_config",
    "AppConfig",
    "SnapshotConfig",
]
