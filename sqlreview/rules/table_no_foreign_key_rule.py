# sqlreview/rules/table_no_foreign_key_rule.py
"""
Foreign keys are not allowed, neither table-level nor inline REFERENCES.
"""
from sqlglot import exp

from ..advice import Code
from ..events import EventTag
from ..normalize import alter_actions, column_constraint_kinds, column_defs, table_name
from .rule_base import RuleBase


class TableNoForeignKeyRule(RuleBase):
    id = "table.no-foreign-key"
    rule_name = "No foreign key"
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE})

    def on_enter(self, node, tag):
        expression = node.expression
        table = table_name(expression)
        found = None
        if tag is EventTag.CREATE_TABLE:
            found = expression.find(exp.ForeignKey)
            if found is None:
                for column in column_defs(expression):
                    if any(isinstance(k, exp.Reference) for k in column_constraint_kinds(column)):
                        found = column
                        break
        else:
            for action in alter_actions(expression):
                if any(index.kind == "foreign" for index in action.constraints):
                    found = action.expression
                    break
        if found is not None:
            self.add_advice(Code.TABLE_HAS_FK, f"Foreign key is not allowed in the table `{table}`",
                            self.find_node(node, found))
