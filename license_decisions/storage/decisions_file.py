"""
Decisions file on disk.

Loads a project's decisions file into a Decisions aggregate and writes
it back. The file holds only locally authored operations; inherited
sources are re-fetched on every load.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from decisioning import decisions

logger = logging.getLogger(__name__)

DEFAULT_DECISIONS_PATH = "doc/dependency_decisions.yml"


class DecisionsFile:
    """
    Reads and writes a YAML decisions file.

    Design decisions:
    - A missing file is an empty set of decisions, not an error
    - Writes go to a sibling temp file that replaces the target
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the store.

        Args:
            config: Full application config. Reads `decisions_file.path`
                    and passes the `inheritance` section to Decisions.
        """
        config = config or {}
        file_config = config.get("decisions_file") or {}
        self.path = Path(file_config.get("path", DEFAULT_DECISIONS_PATH))
        self.inheritance_config = config.get("inheritance") or {}

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> "decisions.Decisions":
        """
        Load decisions from disk, resolving inherited sources.

        Returns:
            Decisions aggregate (empty if the file does not exist)
        """
        if not self.path.exists():
            logger.info(f"No decisions file at {self.path}, starting empty")
            return decisions.Decisions(self.inheritance_config)

        text = self.path.read_text(encoding="utf-8")
        loaded = decisions.Decisions.restore(text, self.inheritance_config)
        logger.info(f"Loaded {len(loaded.operations)} decisions from {self.path}")
        return loaded

    def save(self, to_save: "decisions.Decisions") -> Path:
        """
        Write decisions to disk.

        Args:
            to_save: Decisions to persist

        Returns:
            Path written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".part")
        try:
            temp_path.write_text(to_save.persist(), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError:
            logger.error(f"Failed to save decisions to {self.path}")
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Saved {len(to_save.operations)} decisions to {self.path}")
        return self.path
