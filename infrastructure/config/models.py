"""Configuration models (Pydantic classes)."""

import codecs
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from infrastructure.constants import DATA_DIR, DEFAULT_ENCODING, LOG_DIR, LOG_FILENAME, TAGS_FILENAME, TREE_FILENAME


class SnapshotConfig(BaseModel):
    """Where a taxonomy snapshot (tree file + tag registry file) lives on disk."""

    data_dir: Path = Field(
        default_factory=lambda: DATA_DIR,
        description="Directory holding the snapshot files.",
    )
    tree_file: str = Field(default=TREE_FILENAME, description="Tree file name, relative to data_dir.")
    tags_file: str = Field(default=TAGS_FILENAME, description="Tag registry file name, relative to data_dir.")
    encoding: str = Field(default=DEFAULT_ENCODING, description="Text encoding of both files.")

    @property
    def tree_path(self) -> Path:
        return self.data_dir / self.tree_file

    @property
    def tags_path(self) -> Path:
        return self.data_dir / self.tags_file

    @model_validator(mode="after")
    def _validate(self) -> "SnapshotConfig":
        if not self.tree_file.strip() or not self.tags_file.strip():
            raise ValueError("tree_file and tags_file must be non-empty")
        if self.tree_file == self.tags_file:
            raise ValueError(f"tree_file and tags_file must differ (both are {self.tree_file!r})")
        if not self.encoding.strip():
            raise ValueError("encoding must be non-empty")
        try:
            codecs.lookup(self.encoding)
        except LookupError as err:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from err
        return self


class LoggingConfig(BaseModel):
    """
    Log file settings.

    Defaults match configure_logging(); set log_dir to null for console-only logging.
    """

    log_dir: Path | None = Field(default_factory=lambda: LOG_DIR)
    log_filename: str = LOG_FILENAME
    max_bytes: int = Field(default=10_000_000, ge=0)
    backup_count: int = Field(default=5, ge=0)

    @property
    def log_file(self) -> Path | None:
        return self.log_dir / self.log_filename if self.log_dir is not None else None


class AppConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from configs/taxonomy.yaml
    - Environment overrides applied by the loader
    - Consumed by the CLI and the snapshot use cases
    """

    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
