from pathlib import Path

import pytest

from infrastructure.config.loader import _load_yaml, load_app_config, parse_app_config
from infrastructure.config.models import LoggingConfig, SnapshotConfig


def test_defaults_without_any_sections() -> None:
    cfg = parse_app_config({}, environ={})

    assert cfg.snapshot.tree_path == Path("data") / "taxonomy-tree.txt"
    assert cfg.snapshot.tags_path == Path("data") / "tags-registry.txt"
    assert cfg.snapshot.encoding == "utf-8"
    assert cfg.logging.log_file == Path("logs") / "taxonomy.log"


def test_environment_overrides_snapshot_location() -> None:
    data = {"snapshot": {"data_dir": "data", "encoding": "utf-8"}}
    cfg = parse_app_config(data, environ={"TAXONOMY_DATA_DIR": "/srv/taxonomy", "TAXONOMY_ENCODING": "latin-1"})

    assert cfg.snapshot.data_dir == Path("/srv/taxonomy")
    assert cfg.snapshot.encoding == "latin-1"


def test_empty_environment_values_are_ignored() -> None:
    cfg = parse_app_config({"snapshot": {"data_dir": "here"}}, environ={"TAXONOMY_DATA_DIR": ""})

    assert cfg.snapshot.data_dir == Path("here")


@pytest.mark.parametrize(
    "snapshot",
    [
        {"tree_file": "same.txt", "tags_file": "same.txt"},
        {"tree_file": " "},
        {"encoding": ""},
        {"encoding": "no-such-codec"},
    ],
)
def test_invalid_snapshot_settings_raise(snapshot: dict) -> None:
    with pytest.raises(ValueError):
        parse_app_config({"snapshot": snapshot}, environ={})


def test_section_must_be_a_mapping() -> None:
    with pytest.raises(ValueError):
        parse_app_config({"snapshot": ["data"]}, environ={})


def test_null_log_dir_disables_file_logging() -> None:
    assert LoggingConfig(log_dir=None).log_file is None


def test_snapshot_config_resolves_paths() -> None:
    cfg = SnapshotConfig(data_dir=Path("out"), tree_file="t.txt", tags_file="g.txt")

    assert cfg.tree_path == Path("out/t.txt")
    assert cfg.tags_path == Path("out/g.txt")


def test_load_app_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "taxonomy.yaml"
    path.write_text(
        "snapshot:\n  data_dir: snapshots\n  tree_file: tree.txt\n  tags_file: tags.txt\nlogging:\n  log_dir: null\n",
        encoding="utf-8",
    )

    cfg = load_app_config(path, environ={})

    assert cfg.snapshot.tree_path == Path("snapshots/tree.txt")
    assert cfg.logging.log_file is None


def test_shipped_config_is_valid() -> None:
    cfg = load_app_config(Path(__file__).resolve().parents[2] / "configs" / "taxonomy.yaml", environ={})

    assert cfg.snapshot.tree_file != cfg.snapshot.tags_file


def test_load_yaml_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        _load_yaml(tmp_path / "missing.yaml")

    not_a_dict = tmp_path / "list.yaml"
    not_a_dict.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        _load_yaml(not_a_dict)

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert _load_yaml(empty) == {}
