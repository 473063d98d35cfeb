"""
Translation repository - table access for the translation backfill
Works on any table through reflection, so one job serves every target
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import MetaData, Table, inspect, or_, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import BackfillSchemaError, BackfillWriteError
from services.targets import BackfillTarget

logger = logging.getLogger(__name__)


@dataclass
class PendingRow:
    """A row whose translated flag is still unset, texts keyed by source column"""
    id: Any
    texts: Dict[str, Optional[str]] = field(default_factory=dict)


class TranslationRepository(ABC):
    """Storage operations the backfill job needs from a table"""

    table_name: str

    @abstractmethod
    def validate(self) -> None:
        """Raise BackfillSchemaError if the table or its columns are missing"""

    @abstractmethod
    def ensure_flag_column(self) -> bool:
        """Add the translated flag column if absent; True when it was added"""

    @abstractmethod
    def fetch_pending(self, after_id: Any, limit: int) -> List[PendingRow]:
        """Unflagged rows with id > after_id (None = from the start), ordered by id"""

    @abstractmethod
    def mark_translated(self, row_id: Any, translations: Dict[str, str]) -> bool:
        """
        Store translations (keyed by source column) and set the flag

        Returns False if the row is gone. Raises BackfillWriteError when the
        row cannot be saved; nothing of that row is written then.
        """

    @abstractmethod
    def commit(self) -> None:
        """Make the updates of the current batch durable"""


class SqlTranslationRepository(TranslationRepository):
    """
    TranslationRepository over a SQLAlchemy session

    The table is reflected lazily, after the flag column is ensured. Each row
    is saved inside a savepoint so one rejected value only drops that row.
    """

    def __init__(self, db: Session, target: BackfillTarget):
        self.db = db
        self.target = target
        self.table_name = target.table_name
        self.columns = dict(target.field_pairs)
        self._table: Optional[Table] = None

    def _existing_columns(self) -> Set[str]:
        inspector = inspect(self.db.connection())
        if not inspector.has_table(self.table_name):
            raise BackfillSchemaError(f"Table {self.table_name} does not exist")
        return {column["name"] for column in inspector.get_columns(self.table_name)}

    def _reflect(self) -> Table:
        if self._table is None:
            self._table = Table(self.table_name, MetaData(), autoload_with=self.db.connection())
        return self._table

    def validate(self) -> None:
        columns = self._existing_columns()
        required = [self.target.primary_key]
        for source, translated in self.target.field_pairs:
            required += [source, translated]
        missing = [name for name in dict.fromkeys(required) if name not in columns]
        if missing:
            raise BackfillSchemaError(
                f"Column(s) {', '.join(missing)} do not exist in table {self.table_name}"
            )

    def ensure_flag_column(self) -> bool:
        flag = self.target.flag_field
        if flag in self._existing_columns():
            logger.debug(f"Column {flag} already exists on {self.table_name}")
            return False

        dialect = self.db.get_bind().dialect
        quote = dialect.identifier_preparer.quote
        column_type = "TINYINT(1)" if dialect.name == "mysql" else "SMALLINT"
        ddl = (
            f"ALTER TABLE {quote(self.table_name)} "
            f"ADD COLUMN {quote(flag)} {column_type} NOT NULL DEFAULT 0"
        )

        try:
            self.db.execute(text(ddl))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackfillSchemaError(f"Failed to add column {flag} to {self.table_name}: {e}") from e

        self._table = None
        logger.info(f"Added column {flag} to {self.table_name}")
        return True

    def fetch_pending(self, after_id: Any, limit: int) -> List[PendingRow]:
        table = self._reflect()
        pk = table.c[self.target.primary_key]
        flag = table.c[self.target.flag_field]
        sources = list(self.columns)

        query = (
            select(pk, *(table.c[name] for name in sources))
            .where(or_(flag == 0, flag.is_(None)))
            .order_by(pk)
            .limit(limit)
        )
        if after_id is not None:
            query = query.where(pk > after_id)

        return [
            PendingRow(id=row[0], texts=dict(zip(sources, row[1:])))
            for row in self.db.execute(query)
        ]

    def mark_translated(self, row_id: Any, translations: Dict[str, str]) -> bool:
        table = self._reflect()
        values = {self.columns[source]: translated for source, translated in translations.items()}
        values[self.target.flag_field] = 1

        try:
            with self.db.begin_nested():
                result = self.db.execute(
                    update(table)
                    .where(table.c[self.target.primary_key] == row_id)
                    .values(values)
                )
        except SQLAlchemyError as e:
            raise BackfillWriteError(f"Cannot save {self.table_name} id={row_id}: {e}") from e

        return result.rowcount == 1

    def commit(self) -> None:
        self.db.commit()
