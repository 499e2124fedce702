# sqlreview/rules/column_no_null_rule.py
"""
Columns must be declared NOT NULL (primary key columns are implicitly).
"""
from ..advice import Code
from ..events import EventTag
from ..normalize import is_not_null
from .rule_base import RuleBase


class ColumnNoNullRule(RuleBase):
    id = "column.no-null"
    rule_name = "Column cannot be NULL"
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION})

    def on_enter(self, node, tag):
        column = node.expression
        if not is_not_null(column):
            self.add_advice(
                Code.COLUMN_CANNOT_NULL,
                f"`{self.enclosing_table(node)}`.`{column.name}` cannot have NULL value",
                node,
            )
