from pathlib import Path

import pytest

from application.reference import build_reference_taxonomy
from application.snapshots import describe_taxonomy, load_snapshot, same_content, save_snapshot, tree_signature
from domain.indexed import IndexedTaxonomy
from infrastructure.config.models import SnapshotConfig


def _config(tmp_path: Path) -> SnapshotConfig:
    return SnapshotConfig(data_dir=tmp_path / "snap", tree_file="tree.txt", tags_file="tags.txt")


def test_save_then_load(tmp_path: Path) -> None:
    cfg = _config(tmp_path)
    original = build_reference_taxonomy()

    save_snapshot(original, cfg)
    restored = load_snapshot(cfg)

    assert cfg.tree_path.exists()
    assert cfg.tags_path.exists()
    assert same_content(original, restored)


def test_load_missing_snapshot_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_snapshot(_config(tmp_path))


def test_describe_reference_taxonomy() -> None:
    summary = describe_taxonomy(build_reference_taxonomy())

    assert summary["root"] == "A"
    assert summary["node_count"] == 7
    assert summary["registered_tags"] == ["alfa", "beta"]
    assert summary["used_tags"] == ["alfa", "beta"]
    assert summary["translations"]["alfa"] == {"en-GB": "alfa_uk", "en-US": "alfa_us"}
    assert summary["nodes"][0] == "A"
    assert "A/A/D/E" in summary["nodes"]


def test_describe_empty_taxonomy() -> None:
    summary = describe_taxonomy(IndexedTaxonomy())

    assert summary["root"] is None
    assert summary["node_count"] == 0
    assert summary["nodes"] == []


def test_tree_signature_counts_duplicate_paths_once_per_node() -> None:
    signature = tree_signature(build_reference_taxonomy().root)

    assert sum(signature.values()) == 7
    assert signature[(("A", "A", "D"), ("alfa", "beta"))] == 1
    assert tree_signature(None) == {}
