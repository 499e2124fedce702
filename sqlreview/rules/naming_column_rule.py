# sqlreview/rules/naming_column_rule.py
"""
Column names must match a regular expression and stay within a length limit.

Checked on every column definition (CREATE TABLE, ALTER TABLE ADD) and on
ALTER TABLE ... RENAME COLUMN.
"""
import json

from ..advice import Code
from ..events import EventTag
from ..normalize import alter_actions, table_name
from .naming_table_rule import NamingRuleMixin
from .rule_base import RuleBase


class NamingColumnRule(NamingRuleMixin, RuleBase):
    id = "naming.column"
    rule_name = "Column naming convention"
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION, EventTag.ALTER_TABLE})
    default_payload = {"format": "^[a-z]+(_[a-z]+)*$", "maxLength": 64}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._compile_naming()

    def on_enter(self, node, tag):
        if tag is EventTag.COLUMN_DEFINITION:
            self._check(node, self.enclosing_table(node), node.expression.name)
            return
        table = table_name(node.expression)
        for action in alter_actions(node.expression):
            if action.kind == "rename_column" and action.definition is None:
                self._check(self.find_node(node, action.expression), table, action.new_column)

    def _check(self, node, table, column):
        if not column:
            return
        for violation in self._naming_violations(column):
            if violation == "pattern":
                message = (f"`{table}`.`{column}` mismatches column naming convention, "
                           f"naming format should be {json.dumps(self.pattern.pattern)}")
            else:
                message = (f"`{table}`.`{column}` mismatches column naming convention, "
                           f"its length should be within {self.max_length} characters")
            self.add_advice(Code.NAMING_COLUMN_CONVENTION_MISMATCH, message, node)
