# sqlreview/rules/column_type_disallow_list_rule.py
"""
Columns must not use a disallowed type.

Example (list: ["json", "enum"]):
  ✅ CREATE TABLE t (id INT, doc TEXT);
  ❌ CREATE TABLE t (id INT, doc JSON);
"""
from ..advice import Code
from ..events import EventTag
from ..normalize import alter_actions, base_type, column_type, normalize_type, table_name
from .rule_base import RuleBase


class ColumnTypeDisallowListRule(RuleBase):
    id = "column.type-disallow-list"
    rule_name = "Column type disallow list"
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION, EventTag.ALTER_TABLE})
    default_payload = {"list": ["json", "binary_float"]}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.disallowed = {t.lower() for t in self.payload_list("list")}

    def on_enter(self, node, tag):
        if tag is EventTag.COLUMN_DEFINITION:
            column = node.expression
            self._check(node, self.enclosing_table(node), column.name, column_type(column, self.dialect))
            return
        table = table_name(node.expression)
        for action in alter_actions(node.expression):
            # MODIFY / CHANGE carry a full column definition, checked on its own
            if action.kind == "modify_column" and action.definition is None and action.data_type is not None:
                self._check(self.find_node(node, action.expression), table, action.column,
                            normalize_type(action.data_type, self.dialect))

    def _check(self, node, table, column, type_string):
        if not type_string:
            return
        if type_string in self.disallowed or base_type(type_string) in self.disallowed:
            self.add_advice(
                Code.DISABLED_COLUMN_TYPE,
                f"Disallow column type {type_string.upper()} but column `{table}`.`{column}` is",
                node,
            )
