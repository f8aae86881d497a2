import logging

from infrastructure.observability.logging import (
    ContextInjectFilter,
    clear_op_context,
    get_log_context,
    make_snapshot_tag,
    set_log_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)


def test_snapshot_tag_is_stable_and_short() -> None:
    tag = make_snapshot_tag("data/tree.txt", "data/tags.txt")

    assert tag == make_snapshot_tag("data/tree.txt", "data/tags.txt")
    assert tag != make_snapshot_tag("data/tags.txt", "data/tree.txt")
    assert len(tag) == 8
    assert len(make_snapshot_tag("a", "b", length=4)) == 4


def test_filter_injects_context_fields() -> None:
    set_log_context(tree_file="data/tree.txt", tags_file="data/tags.txt", op="show")
    record = _record()

    assert ContextInjectFilter().filter(record) is True
    assert record.snapshot == make_snapshot_tag("data/tree.txt", "data/tags.txt")
    assert record.op == "show"

    ctx = get_log_context()
    assert ctx["snapshot_full"] == "data/tree.txt|data/tags.txt"
    assert ctx["op"] == "show"
    clear_op_context()


def test_clear_op_context_keeps_snapshot() -> None:
    set_log_context(tree_file="t", tags_file="g", op="convert")
    clear_op_context()

    ctx = get_log_context()
    assert ctx["op"] == "-"
    assert ctx["snapshot_tag"] == make_snapshot_tag("t", "g")
