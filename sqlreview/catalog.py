# sqlreview/catalog.py
"""
Schema catalog collaborator and the two-tier column type resolver.

The catalog describes the schema *before* the script runs. The overlay
records what earlier statements of the same script did to it, and always
wins over the catalog, so lookups see the schema as it will be after the
script runs.
"""
import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexInfo:
    name: str
    columns: Tuple[str, ...]
    primary: bool = False
    unique: bool = False


class Catalog:
    """Read-only view of a persisted schema."""
    case_sensitive = False

    def column_type(self, table: str, column: str) -> Optional[str]:
        raise NotImplementedError

    def index_list(self, table: str) -> List[IndexInfo]:
        raise NotImplementedError

    def has_table(self, table: str) -> bool:
        raise NotImplementedError

    def has_primary_key(self, table: str) -> bool:
        return any(index.primary for index in self.index_list(table))


class InMemoryCatalog(Catalog):
    """Catalog backed by a plain mapping.

    Expected shape::

        {
          "case_sensitive": false,
          "tables": {
            "orders": {
              "columns": {"id": "bigint", "note": "text"},
              "indexes": [{"name": "PRIMARY", "columns": ["id"], "primary": true}]
            }
          }
        }
    """

    def __init__(self, tables: Optional[Dict] = None, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self._columns: Dict[str, Dict[str, str]] = {}
        self._indexes: Dict[str, List[IndexInfo]] = {}
        for table, spec in (tables or {}).items():
            key = self._key(table)
            self._columns[key] = {
                self._key(col): str(col_type).lower()
                for col, col_type in (spec.get("columns") or {}).items()
            }
            self._indexes[key] = [
                IndexInfo(
                    name=idx.get("name", ""),
                    columns=tuple(idx.get("columns") or ()),
                    primary=bool(idx.get("primary", False)),
                    unique=bool(idx.get("unique", False)),
                )
                for idx in (spec.get("indexes") or [])
            ]

    @classmethod
    def from_dict(cls, data: Dict) -> "InMemoryCatalog":
        return cls(data.get("tables") or {}, case_sensitive=bool(data.get("case_sensitive", False)))

    @classmethod
    def from_file(cls, path) -> "InMemoryCatalog":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("loaded catalog %s with %d table(s)", path, len(data.get("tables") or {}))
        return cls.from_dict(data)

    def _key(self, name: str) -> str:
        return name if self.case_sensitive else name.lower()

    def has_table(self, table):
        return self._key(table) in self._columns

    def column_type(self, table, column):
        return self._columns.get(self._key(table), {}).get(self._key(column))

    def index_list(self, table):
        return list(self._indexes.get(self._key(table), []))


class ColumnTypeOverlay:
    """Script-local (table, column) -> normalized type mapping."""

    def __init__(self, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self._tables: Dict[str, Dict[str, str]] = {}

    def _key(self, name):
        return name if self.case_sensitive else name.lower()

    def set(self, table, column, column_type):
        self._tables.setdefault(self._key(table), {})[self._key(column)] = column_type

    def get(self, table, column) -> Optional[str]:
        return self._tables.get(self._key(table), {}).get(self._key(column))

    def delete(self, table, column):
        self._tables.get(self._key(table), {}).pop(self._key(column), None)

    def rename(self, table, old, new, column_type=None):
        """Move ``old`` to ``new``; a new definition's type replaces the old one."""
        previous = self.get(table, old)
        self.delete(table, old)
        if column_type is None:
            column_type = previous
        if column_type is not None:
            self.set(table, new, column_type)

    def drop_table(self, table):
        self._tables.pop(self._key(table), None)


class ColumnTypeResolver:
    """Resolve a column type from the overlay first, then the catalog."""

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog
        self.overlay = ColumnTypeOverlay(case_sensitive=getattr(catalog, "case_sensitive", False))

    def resolve(self, table: str, column: str) -> Tuple[Optional[str], bool]:
        column_type = self.overlay.get(table, column)
        if column_type is not None:
            return column_type, True
        if self.catalog is not None:
            column_type = self.catalog.column_type(table, column)
            if column_type is not None:
                return column_type, True
        return None, False
