# sqlreview/rules/column_set_default_for_not_null_rule.py
"""
NOT NULL columns must declare a DEFAULT value.

Example:
  ✅ CREATE TABLE t (id INT PRIMARY KEY, age INT NOT NULL DEFAULT 0);
  ❌ CREATE TABLE t (id INT PRIMARY KEY, age INT NOT NULL);
"""
from ..advice import Code
from ..events import EventTag
from ..normalize import has_default, is_auto_increment, is_not_null, is_primary_key_column
from .rule_base import RuleBase


class ColumnSetDefaultForNotNullRule(RuleBase):
    id = "column.set-default-for-not-null"
    rule_name = "NOT NULL column requires DEFAULT"
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION})

    def on_enter(self, node, tag):
        column = node.expression
        if not is_not_null(column) or has_default(column):
            return
        if is_primary_key_column(column) or is_auto_increment(column, self.dialect):
            return
        self.add_advice(
            Code.COLUMN_NOT_NULL_NO_DEFAULT,
            f"Column `{self.enclosing_table(node)}`.`{column.name}` is NOT NULL but doesn't have DEFAULT",
            node,
        )
