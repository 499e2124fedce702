# sqlreview/rules/table_require_pk_rule.py
"""
Tables created or altered by the script must still have a primary key when
the script ends.

Primary key columns are tracked per table. A table first seen through ALTER
starts from the catalog's primary index when the catalog knows the table;
otherwise it is assumed compliant and left alone.

Example:
  ✅ CREATE TABLE t (id INT PRIMARY KEY);
  ❌ CREATE TABLE t (id INT);
  ❌ ALTER TABLE t DROP COLUMN id;   -- id was the only key column
"""
from typing import Dict, Set

from ..advice import Code
from ..events import EventTag
from ..normalize import (
    alter_actions,
    column_defs,
    constraint_defs,
    drop_table_names,
    is_primary_key_column,
    table_elements,
    table_name,
)
from .rule_base import RuleBase


class TableRequirePKRule(RuleBase):
    id = "table.require-pk"
    rule_name = "Table requires primary key"
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE, EventTag.DROP_TABLE})

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tables: Dict[str, Set[str]] = {}
        self.lines: Dict[str, int] = {}

    def on_enter(self, node, tag):
        expression = node.expression
        if tag is EventTag.CREATE_TABLE:
            table = table_name(expression)
            keys = {c.name for c in column_defs(expression) if is_primary_key_column(c)}
            for index in constraint_defs(table_elements(expression)):
                if index.kind == "primary":
                    keys.update(index.columns)
            self.tables[table] = keys
            self.lines[table] = self.line_of(node)
        elif tag is EventTag.ALTER_TABLE:
            self._alter_table(node)
        elif tag is EventTag.DROP_TABLE:
            for table in drop_table_names(expression):
                self.tables.pop(table, None)
                self.lines.pop(table, None)

    def finalize(self):
        for table in sorted(self.tables):
            if not self.tables[table]:
                self.add_advice(Code.TABLE_REQUIRE_PK,
                                f"Table `{table}` requires PRIMARY KEY",
                                line=self.lines.get(table, 1))

    def _alter_table(self, node):
        table = table_name(node.expression)
        for action in alter_actions(node.expression):
            keys = self._keys(table, node)
            if keys is None:
                return
            if action.kind == "add_column" and is_primary_key_column(action.definition):
                keys.add(action.column)
            elif action.kind == "add_constraint":
                for index in action.constraints:
                    if index.kind == "primary":
                        keys.update(index.columns)
            elif action.kind == "drop_column" and action.column in keys:
                keys.discard(action.column)
                if not keys:
                    self.lines[table] = self.line_of(self.find_node(node, action.expression))
            elif action.kind == "rename_column" and action.column in keys:
                keys.discard(action.column)
                keys.add(action.new_column)

    def _keys(self, table, node):
        """Tracked key columns of ``table``; None when nothing is known about it."""
        if table in self.tables:
            return self.tables[table]
        if self.catalog is None or not self.catalog.has_table(table):
            return None
        keys = set()
        for index in self.catalog.index_list(table):
            if index.primary:
                keys.update(index.columns)
        self.tables[table] = keys
        self.lines[table] = self.line_of(node)
        return keys
