# sqlreview/rules/statement_insert_must_specify_column_rule.py
"""
INSERT statements must name their target columns.

Example:
  ✅ INSERT INTO t (id, name) VALUES (1, 'a');
  ❌ INSERT INTO t VALUES (1, 'a');
"""
from sqlglot import exp

from ..advice import Code
from ..events import EventTag
from .rule_base import RuleBase


class InsertMustSpecifyColumnRule(RuleBase):
    id = "statement.insert.must-specify-column"
    rule_name = "INSERT must specify columns"
    enter_tags = frozenset({EventTag.INSERT})

    def on_enter(self, node, tag):
        target = node.expression.this
        if isinstance(target, exp.Schema) and target.expressions:
            return
        self.add_advice(Code.INSERT_NOT_SPECIFY_COLUMN,
                        f"The INSERT statement must specify columns but \"{node.text}\" does not",
                        node)
