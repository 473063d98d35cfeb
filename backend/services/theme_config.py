"""
Theme configuration storage
The theme settings screen submits nested form data which is merged into a JSON file
"""
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from core.config import settings
from core.errors import ThemeConfigError

logger = logging.getLogger(__name__)

# Multi-select form fields stored as "a|b|c"
PIPE_JOINED_FIELDS = (
    ("fnav", "ym"),
    ("rtnav", "ym"),
    ("show", "filter"),
)


class ThemeConfigStore:
    """Reads and writes the theme configuration file"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.THEME_CONFIG_PATH)

    def load(self) -> Dict[str, Any]:
        """Current configuration, empty when nothing was saved yet"""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ThemeConfigError(f"Cannot read theme config {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ThemeConfigError(f"Theme config {self.path} must hold a JSON object")
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """Replace the file contents atomically"""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as temp_file:
                json.dump(data, temp_file, ensure_ascii=False, indent=2)
            os.replace(temp_path, self.path)
        except OSError as e:
            raise ThemeConfigError(f"Cannot write theme config {self.path}: {e}") from e

    def update_theme(self, submitted: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge a submitted form into the stored configuration

        The submitted "theme" section replaces the stored one, other top-level
        keys are kept. Returns the saved configuration.
        """
        theme = flatten_theme(submitted.get("theme") or {})
        merged = {**self.load(), "theme": theme}
        self.save(merged)
        logger.info(f"Theme config saved to {self.path}")
        return merged


def flatten_theme(theme: Dict[str, Any]) -> Dict[str, Any]:
    """Pipe-join the multi-select fields of a theme section"""
    theme = copy.deepcopy(theme)
    for section, field in PIPE_JOINED_FIELDS:
        values = theme.get(section, {}).get(field) if isinstance(theme.get(section), dict) else None
        if isinstance(values, (list, tuple)):
            theme[section][field] = "|".join(str(value) for value in values)
    return theme
