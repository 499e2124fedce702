# sqlreview/rules/statement_select_no_select_all_rule.py
"""
Queries must list their columns instead of using ``*``.

The advice quotes the outermost query containing the star.

Example:
  ✅ SELECT id, name FROM t;
  ❌ SELECT * FROM t;
  ❌ SELECT t.* FROM t;
"""
from ..advice import Code
from ..events import EventTag
from .rule_base import RuleBase


class NoSelectAllRule(RuleBase):
    id = "statement.select.no-select-all"
    rule_name = "No SELECT all"
    enter_tags = frozenset({EventTag.QUERY, EventTag.SELECT_ITEM_LIST})
    exit_tags = frozenset({EventTag.QUERY})

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.queries = []

    def on_enter(self, node, tag):
        if tag is EventTag.QUERY:
            self.queries.append(node)
            return
        if any(child.expression.is_star for child in node.children):
            query = self.queries[0] if self.queries else node
            self.add_advice(Code.STATEMENT_SELECT_ALL, f"\"{query.text}\" uses SELECT all", node)

    def on_exit(self, node, tag):
        if self.queries:
            self.queries.pop()
