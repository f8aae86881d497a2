from pathlib import Path

# Repo-root conventional directories/files (overrideable via configs/taxonomy.yaml)
CONFIG_DIR = Path("configs")
CONFIG_FILE = CONFIG_DIR / "taxonomy.yaml"

DATA_DIR = Path("data")
TREE_FILENAME = "taxonomy-tree.txt"
TAGS_FILENAME = "tags-registry.txt"
DEFAULT_ENCODING = "utf-8"

LOG_DIR = Path("logs")
LOG_FILENAME = "taxonomy.log"

# Environment overrides (read after an optional .env file is loaded)
ENV_DATA_DIR = "TAXONOMY_DATA_DIR"
ENV_ENCODING = "TAXONOMY_ENCODING"
