"""
CLI entrypoint for the taxonomy snapshot tools.

This script performs the following steps:
- loads .env (if present), configs/taxonomy.yaml
- configures console + rotating file logging
- runs one subcommand against the configured snapshot files:
  - demo: build the reference taxonomy and write it
  - show: read the snapshot and log a summary
  - convert: read, freeze, thaw and write the snapshot back, checking nothing was lost
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from application import (
    build_reference_taxonomy,
    freeze,
    load_snapshot,
    log_taxonomy_summary,
    same_content,
    save_snapshot,
    thaw,
)
from domain.errors import TaxonomyError
from infrastructure.config import AppConfig, load_app_config
from infrastructure.constants import CONFIG_FILE
from infrastructure.io import ensure_exists
from infrastructure.observability import clear_op_context, configure_logging, set_log_context

logger = logging.getLogger(__name__)

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build, inspect and convert taxonomy snapshots")
    p.add_argument(
        "command",
        choices=["demo", "show", "convert"],
        help="demo: write the reference taxonomy; show: log the snapshot; convert: round-trip it through both engines",
    )
    p.add_argument(
        "--config",
        type=str,
        default=str(CONFIG_FILE),
        help="Path to taxonomy.yaml (default: configs/taxonomy.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded when present (default: .env)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=LEVELS,
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=LEVELS,
        help="File log level",
    )
    return p.parse_args(argv)


def run_demo(cfg: AppConfig) -> None:
    taxonomy = build_reference_taxonomy()
    logger.info("Built reference taxonomy: %d nodes", taxonomy.node_count)
    save_snapshot(taxonomy, cfg.snapshot)
    log_taxonomy_summary(taxonomy)


def run_show(cfg: AppConfig) -> None:
    taxonomy = load_snapshot(cfg.snapshot)
    log_taxonomy_summary(taxonomy)


def run_convert(cfg: AppConfig) -> bool:
    """Returns True when the round trip preserved the whole taxonomy."""
    original = load_snapshot(cfg.snapshot)
    snapshot = freeze(original)
    logger.info("Frozen snapshot: %r", snapshot)

    restored = thaw(snapshot)
    preserved = same_content(original, restored) and same_content(snapshot, restored)
    if not preserved:
        logger.error("Round trip changed the taxonomy; snapshot files left untouched")
        return False

    save_snapshot(restored, cfg.snapshot)
    logger.info("Round trip preserved %d nodes and %d tags", restored.node_count, len(restored.all_registered_tags()))
    return True


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    config_path = Path(args.config)
    ensure_exists(config_path, "taxonomy.yaml")
    cfg = load_app_config(config_path)

    configure_logging(
        log_file=cfg.logging.log_file,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
        max_bytes=cfg.logging.max_bytes,
        backup_count=cfg.logging.backup_count,
    )
    logger.info("Snapshot files: %s, %s", cfg.snapshot.tree_path, cfg.snapshot.tags_path)

    set_log_context(op=args.command)
    try:
        if args.command == "demo":
            run_demo(cfg)
        elif args.command == "show":
            run_show(cfg)
        elif not run_convert(cfg):
            return 1
    except (TaxonomyError, FileNotFoundError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        clear_op_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
