"""
Backfill targets - which tables and columns the translation backfill touches
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.config import settings
from core.errors import BackfillConfigError

logger = logging.getLogger(__name__)


class FieldMapping(BaseModel):
    """A source column and the column its translation is written to"""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    translated_name: Optional[str] = None


class BackfillTarget(BaseModel):
    """
    One table to backfill

    Columns are given either as a single source_field/translated_field pair
    or as a list of fields ({"name", "translated_name"}), all of them
    translated and saved together per row. A missing translated column means
    the source is overwritten in place. Unknown keys are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    table_name: str = Field(..., min_length=1)
    primary_key: str = "id"
    source_field: Optional[str] = None
    translated_field: Optional[str] = None
    fields: List[FieldMapping] = Field(default_factory=list)
    flag_field: str = "translated"

    @model_validator(mode="after")
    def check_field_style(self):
        if self.fields and (self.source_field or self.translated_field):
            raise ValueError("Use either fields or source_field/translated_field, not both")
        return self

    @property
    def field_pairs(self) -> List[Tuple[str, str]]:
        """(source column, translated column) pairs"""
        if self.fields:
            return [(field.name, field.translated_name or field.name) for field in self.fields]
        source = self.source_field or "name"
        return [(source, self.translated_field or source)]


def default_target() -> BackfillTarget:
    """The movie table under the configured table prefix"""
    return BackfillTarget(table_name=f"{settings.TABLE_PREFIX}movie")


def load_backfill_targets(targets_file: Optional[str] = None) -> List[BackfillTarget]:
    """
    Load targets from a JSON file, or fall back to the default movie table

    The file holds either a list of targets or {"translation_tables": [...]}.
    """
    targets_file = targets_file if targets_file is not None else settings.BACKFILL_TARGETS_FILE
    if not targets_file:
        return [default_target()]

    path = Path(targets_file)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise BackfillConfigError(f"Cannot read backfill targets from {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("translation_tables", [])
    if not isinstance(raw, list) or not raw:
        raise BackfillConfigError(f"No backfill targets defined in {path}")

    try:
        targets = [BackfillTarget(**item) for item in raw]
    except (TypeError, ValidationError) as e:
        raise BackfillConfigError(f"Invalid backfill target in {path}: {e}") from e

    logger.info(f"Loaded {len(targets)} backfill target(s) from {path}")
    return targets


def select_targets(targets: List[BackfillTarget], table: Optional[str] = None) -> List[BackfillTarget]:
    """Restrict targets to one table name; None keeps them all"""
    if table is None:
        return targets

    selected = [target for target in targets if target.table_name == table]
    if not selected:
        known = ", ".join(target.table_name for target in targets)
        raise BackfillConfigError(f"Unknown backfill table '{table}'. Configured: {known}")
    return selected
