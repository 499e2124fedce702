# sqlreview/rules/statement_where_no_leading_wildcard_like_rule.py
"""
LIKE patterns must not start with ``%``; such filters cannot use an index.

Example:
  ✅ SELECT id FROM t WHERE name LIKE 'abc%';
  ❌ SELECT id FROM t WHERE name LIKE '%abc';
"""
from sqlglot import exp

from ..advice import Code
from ..events import EventTag
from .rule_base import RuleBase


class NoLeadingWildcardLikeRule(RuleBase):
    id = "statement.where.no-leading-wildcard-like"
    rule_name = "No leading wildcard LIKE"
    enter_tags = frozenset({EventTag.LIKE_PREDICATE})

    def on_enter(self, node, tag):
        pattern = node.expression.expression
        if isinstance(pattern, exp.Literal) and pattern.is_string and pattern.this.startswith("%"):
            statement = self.statement_root(node)
            self.add_advice(Code.STATEMENT_LEADING_WILDCARD_LIKE,
                            f"\"{statement.text}\" uses leading wildcard LIKE", node)
