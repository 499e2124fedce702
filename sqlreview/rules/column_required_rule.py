# sqlreview/rules/column_required_rule.py
"""
Every table must end the script with the configured required columns.

The rule keeps one record per table touched by the script:
  - CREATE TABLE starts the table with every required column absent, then
    marks the ones it defines present.
  - ALTER TABLE ADD / DROP / RENAME / CHANGE COLUMN flip the marks. A table first seen
    through ALTER is assumed to have had every required column.
  - DROP TABLE forgets the table.

Missing columns are reported once per table after the whole script is walked,
at the line of the statement that last made a required column absent.

Example (required: id, created_ts):
  ✅ CREATE TABLE t (id INT, created_ts TIMESTAMP);
  ❌ CREATE TABLE t (id INT);
  ❌ ALTER TABLE t DROP COLUMN created_ts;
"""
import logging
from typing import Dict

from ..advice import Code
from ..events import EventTag
from ..normalize import alter_actions, column_defs, drop_table_names, table_name
from .rule_base import RuleBase

logger = logging.getLogger(__name__)


class ColumnRequiredRule(RuleBase):
    id = "column.required"
    rule_name = "Required columns"
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE, EventTag.DROP_TABLE})
    default_payload = {"list": ["id", "created_ts", "updated_ts", "creator_id", "updater_id"]}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.required = self.payload_list("list")
        # table -> {required column -> present}
        self.tables: Dict[str, Dict[str, bool]] = {}
        self.lines: Dict[str, int] = {}

    def on_enter(self, node, tag):
        if tag is EventTag.CREATE_TABLE:
            self._create_table(node)
        elif tag is EventTag.ALTER_TABLE:
            self._alter_table(node)
        elif tag is EventTag.DROP_TABLE:
            for table in drop_table_names(node.expression):
                self.tables.pop(table, None)
                self.lines.pop(table, None)

    def finalize(self):
        for table in sorted(self.tables):
            missing = sorted(c for c in self.required if not self.tables[table].get(c))
            if missing:
                self.add_advice(
                    Code.COLUMN_REQUIRED,
                    f"Table `{table}` requires columns: {', '.join(missing)}",
                    line=self.lines.get(table, 1),
                )

    # -------------------------
    # Transitions
    # -------------------------
    def _create_table(self, node):
        table = table_name(node.expression)
        self.tables[table] = {c: False for c in self.required}
        self.lines[table] = self.line_of(node)
        for column in column_defs(node.expression):
            self._add_column(table, column.name)

    def _alter_table(self, node):
        table = table_name(node.expression)
        for action in alter_actions(node.expression):
            line = self.line_of(self.find_node(node, action.expression))
            if action.kind == "add_column":
                self._add_column(table, action.column)
            elif action.kind == "drop_column":
                if self._drop_column(table, action.column):
                    self.lines[table] = line
            elif action.kind == "rename_column":
                if self._rename_column(table, action.column, action.new_column):
                    self.lines[table] = line

    def _is_required(self, column):
        return column in self.required

    def _track(self, table):
        """Record for ``table``, assuming a table first seen here was compliant."""
        if table not in self.tables:
            logger.debug("column.required: tracking %s from its first ALTER", table)
            self.tables[table] = {c: True for c in self.required}
        return self.tables[table]

    def _add_column(self, table, column):
        if self._is_required(column):
            self._track(table)[column] = True

    def _drop_column(self, table, column) -> bool:
        if not self._is_required(column):
            return False
        self._track(table)[column] = False
        return True

    def _rename_column(self, table, old, new) -> bool:
        """Returns whether a required column went missing."""
        old_required, new_required = self._is_required(old), self._is_required(new)
        if old == new or (not old_required and not new_required):
            return False
        record = self._track(table)
        if new_required:
            record[new] = True
        if old_required:
            record[old] = False
        return old_required
