# sqlreview/rules/column_require_default_rule.py
"""
Columns must declare a DEFAULT value.

Primary key and auto-increment columns are exempt, as are types that cannot
carry a literal default in MySQL (BLOB, TEXT, JSON, GEOMETRY families).
"""
from ..advice import Code
from ..events import EventTag
from ..normalize import base_type, column_type, has_default, is_auto_increment, is_primary_key_column
from .rule_base import RuleBase

NO_DEFAULT_TYPES = frozenset({
    "blob", "tinyblob", "mediumblob", "longblob",
    "text", "tinytext", "mediumtext", "longtext",
    "json", "geometry", "point", "linestring", "polygon",
})


class ColumnRequireDefaultRule(RuleBase):
    id = "column.require-default"
    rule_name = "Column requires DEFAULT"
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION})

    def on_enter(self, node, tag):
        column = node.expression
        if has_default(column) or is_primary_key_column(column) or is_auto_increment(column, self.dialect):
            return
        if base_type(column_type(column, self.dialect) or "") in NO_DEFAULT_TYPES:
            return
        self.add_advice(
            Code.COLUMN_REQUIRE_DEFAULT,
            f"Column `{self.enclosing_table(node)}`.`{column.name}` doesn't have DEFAULT.",
            node,
        )
