# sqlreview/rules/statement_disallow_commit_rule.py
"""COMMIT is left to the deployment tool, not to the reviewed script."""
from ..advice import Code
from ..events import EventTag
from .rule_base import RuleBase


class DisallowCommitRule(RuleBase):
    id = "statement.disallow-commit"
    rule_name = "Disallow COMMIT"
    enter_tags = frozenset({EventTag.COMMIT})

    def on_enter(self, node, tag):
        self.add_advice(Code.STATEMENT_DISALLOW_COMMIT,
                        f"Commit is not allowed, related statement: \"{node.text}\"", node)
