# sqlreview/rules/index_pk_type_allowlist_rule.py
"""
Primary key columns must use one of the allowed types.

Column types are resolved through the script overlay first, then the catalog,
so ``ALTER TABLE t ADD PRIMARY KEY (x)`` sees the type an earlier statement
gave ``x``. Columns whose type cannot be resolved are skipped.
"""
from ..advice import Code
from ..normalize import base_type, column_defs, column_type, is_primary_key_column
from .rule_base import ColumnTypeTrackingRule


class IndexPKTypeAllowlistRule(ColumnTypeTrackingRule):
    id = "index.primary-key-type-allowlist"
    rule_name = "Primary key type allowlist"
    default_payload = {"list": ["int", "bigint", "serial", "bigserial"]}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.allowlist = {t.lower() for t in self.payload_list("list")}

    def _allowed(self, type_string):
        return type_string in self.allowlist or base_type(type_string) in self.allowlist

    def _report(self, node, table, column, type_string):
        self.add_advice(
            Code.INDEX_PK_TYPE,
            f"The column `{column}` in table `{table}` is one of the primary key, "
            f"but its type \"{type_string}\" is not in allowlist",
            node,
        )

    def _check_column_def(self, node, table, column):
        if not is_primary_key_column(column):
            return
        type_string = column_type(column, self.dialect)
        if type_string and not self._allowed(type_string):
            self._report(self.find_node(node, column), table, column.name, type_string)

    def _check_key(self, node, table, index):
        for column in index.columns:
            type_string, found = self.resolver.resolve(table, column)
            if found and not self._allowed(type_string):
                self._report(self.find_node(node, index.expression), table, column, type_string)

    def check_create_table(self, node, table):
        for column in column_defs(node.expression):
            self._check_column_def(node, table, column)
        for index in self.constraints_of(node.expression):
            if index.kind == "primary":
                self._check_key(node, table, index)

    def check_alter_action(self, node, table, action):
        if action.kind == "add_column":
            self._check_column_def(node, table, action.definition)
        elif action.kind == "add_constraint":
            for index in action.constraints:
                if index.kind == "primary":
                    self._check_key(node, table, index)
