"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the snapshot workflows driven by the CLI.
"""

from application.conversion import freeze, thaw
from application.reference import build_reference_taxonomy
from application.snapshots import (
    describe_taxonomy,
    load_snapshot,
    log_taxonomy_summary,
    same_content,
    save_snapshot,
    tree_signature,
)

__all__ = [
    # Main workflows
    "save_snapshot",
    "load_snapshot",
    "freeze",
    "thaw",
    # Reporting
    "describe_taxonomy",
    "log_taxonomy_summary",
    # Comparison utilities
    "tree_signature",
    "same_content",
    "build_reference_taxonomy",
]
