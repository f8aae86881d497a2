"""
Logging setup with contextvars-based metadata injection.

- Adds the snapshot tag and the current operation into every log line (via contextvars).
- Supports console-only logging OR console + rotating file logs.
"""

import contextvars
import hashlib
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Context variables for dynamic log metadata
cv_snapshot_tag = contextvars.ContextVar("snapshot_tag", default="-")
cv_op = contextvars.ContextVar("op", default="-")

# Full snapshot location kept for metadata (not printed every line)
cv_snapshot_full = contextvars.ContextVar("snapshot_full", default="-")


def make_snapshot_tag(tree_file: Path | str, tags_file: Path | str, length: int = 8) -> str:
    """
    Stable short tag derived from the snapshot file pair.
    Uses BLAKE2s, so the same pair always logs under the same tag.
    """
    key = f"{tree_file}|{tags_file}"
    h = hashlib.blake2s(key.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Inject context variables into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.snapshot = cv_snapshot_tag.get() or "-"
        record.op = cv_op.get() or "-"
        return True


def set_log_context(
    *,
    tree_file: Path | str | None = None,
    tags_file: Path | str | None = None,
    op: str | None = None,
) -> None:
    """Update logging context (thread-safe via contextvars)."""
    if tree_file is not None and tags_file is not None:
        cv_snapshot_full.set(f"{tree_file}|{tags_file}")
        cv_snapshot_tag.set(make_snapshot_tag(tree_file, tags_file))

    if op is not None:
        cv_op.set(str(op))


def get_log_context() -> dict[str, str]:
    """Return the current context in a convenient dict form."""
    return {
        "snapshot_tag": str(cv_snapshot_tag.get() or "-"),
        "snapshot_full": str(cv_snapshot_full.get() or "-"),
        "op": str(cv_op.get() or "-"),
    }


def clear_op_context() -> None:
    """Reset operation context to default (keep snapshot info)."""
    cv_op.set("-")


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application logging with contextvars support.

    Args:
        log_file: Path to log file (None for console only)
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    # Clear existing handlers to avoid duplicate logs if called multiple times
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # keep root permissive; handlers enforce levels

    # Formatter includes context fields injected by ContextInjectFilter
    console_fmt = "%(asctime)s [%(levelname)s] s=%(snapshot)s op=%(op)s | %(message)s"
    file_fmt = "%(asctime)s [%(levelname)s] %(name)s | s=%(snapshot)s op=%(op)s | %(message)s"

    console_formatter = logging.Formatter(console_fmt, datefmt="%H:%M:%S")
    file_formatter = logging.Formatter(file_fmt, datefmt="%Y-%m-%d %H:%M:%S")

    ctx_filter = ContextInjectFilter()

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(console_formatter)
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    # File handler (detailed, DEBUG+, with rotation)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        fh.setLevel(file_level)
        fh.setFormatter(file_formatter)
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )
