# sqlreview/rules/statement_where_require_rule.py
"""
UPDATE and DELETE statements must have a WHERE clause.

A WHERE belonging to a subquery does not count for the enclosing statement.
"""
from ..advice import Code
from ..events import EventTag
from .rule_base import RuleBase


class WhereRequireRule(RuleBase):
    id = "statement.where.require"
    rule_name = "WHERE clause required"
    enter_tags = frozenset({EventTag.UPDATE, EventTag.DELETE, EventTag.WHERE_CLAUSE})
    exit_tags = frozenset({EventTag.UPDATE, EventTag.DELETE})

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # [node, has_where] per open UPDATE / DELETE
        self.open = []

    def on_enter(self, node, tag):
        if tag is EventTag.WHERE_CLAUSE:
            if self.open and node.parent is self.open[-1][0]:
                self.open[-1][1] = True
            return
        self.open.append([node, False])

    def on_exit(self, node, tag):
        current, has_where = self.open.pop()
        if not has_where:
            self.add_advice(Code.STATEMENT_NO_WHERE, f"\"{current.text}\" requires WHERE clause", current)
