# sqlreview/rules/index_type_no_blob_rule.py
"""
Indexed columns must not be of a BLOB / TEXT type.

Covers keys declared inside CREATE TABLE, keys added by ALTER TABLE and
CREATE INDEX. Types come from the script overlay, then the catalog.

Example:
  ✅ CREATE TABLE t (id INT, name VARCHAR(20), INDEX idx_t_name (name));
  ❌ CREATE TABLE t (id INT, body TEXT, INDEX idx_t_body (body));
"""
from ..advice import Code
from ..normalize import base_type, create_index_def, create_index_table
from .rule_base import ColumnTypeTrackingRule

BLOB_TYPES = frozenset({
    "blob", "tinyblob", "mediumblob", "longblob",
    "text", "tinytext", "mediumtext", "longtext",
    "binary", "varbinary", "bytea",
})

_INDEX_KINDS = ("primary", "unique", "index", "fulltext", "spatial")


class IndexTypeNoBlobRule(ColumnTypeTrackingRule):
    id = "index.type-no-blob"
    rule_name = "No BLOB/TEXT index"

    def _check_index(self, node, table, index):
        if index.kind not in _INDEX_KINDS:
            return
        for column in index.columns:
            type_string, found = self.resolver.resolve(table, column)
            if found and type_string and base_type(type_string) in BLOB_TYPES:
                self.add_advice(
                    Code.INDEX_TYPE_NO_BLOB,
                    f"Columns in index must not be BLOB or TEXT but `{table}`.`{column}` "
                    f"is {type_string}",
                    self.find_node(node, index.expression),
                )

    def check_create_table(self, node, table):
        for index in self.constraints_of(node.expression):
            self._check_index(node, table, index)

    def check_alter_action(self, node, table, action):
        if action.kind == "add_constraint":
            for index in action.constraints:
                self._check_index(node, table, index)

    def check_create_index(self, node):
        index = create_index_def(node.expression)
        if index is not None:
            self._check_index(node, create_index_table(node.expression), index)
