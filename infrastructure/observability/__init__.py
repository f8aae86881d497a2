"""
Observability: structured logging and context management.

Provides:
- Contextual logging with snapshot tag and operation name
- Log rotation and file management
"""

from infrastructure.observability.logging import (
    ContextInjectFilter,
    clear_op_context,
    configure_logging,
    get_log_context,
    make_snapshot_tag,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "set_log_context",
    "get_log_context",
    "clear_op_context",
    "make_snapshot_tag",
    "ContextInjectFilter",
]
