# sqlreview/rules/naming_table_rule.py
"""
Table names must match a regular expression and stay within a length limit.

Checked on CREATE TABLE and on ALTER TABLE ... RENAME TO.

Example (format ``^[a-z]+(_[a-z]+)*$``):
  ✅ CREATE TABLE order_item (id INT);
  ❌ CREATE TABLE OrderItem (id INT);
"""
import json
import re

from ..advice import Code
from ..errors import ConfigurationError
from ..events import EventTag
from ..naming import DEFAULT_NAME_LENGTH_LIMIT
from ..normalize import alter_actions, table_name
from .rule_base import RuleBase


class NamingRuleMixin:
    """Compile ``format`` / ``maxLength`` from the payload once per rule."""

    def _compile_naming(self):
        fmt = self.payload_str("format")
        if not fmt:
            raise ConfigurationError(self.id, "payload field 'format' is required")
        try:
            self.pattern = re.compile(fmt)
        except re.error as e:
            raise ConfigurationError(self.id, f"invalid format {fmt!r}: {e}") from e
        self.max_length = self.payload_int("maxLength", DEFAULT_NAME_LENGTH_LIMIT)

    def _naming_violations(self, name):
        """Yields ("pattern" | "length") for each violated dimension."""
        if not self.pattern.search(name):
            yield "pattern"
        if self.max_length and self.max_length > 0 and len(name) > self.max_length:
            yield "length"


class NamingTableRule(NamingRuleMixin, RuleBase):
    id = "naming.table"
    rule_name = "Table naming convention"
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE})
    default_payload = {"format": "^[a-z]+(_[a-z]+)*$", "maxLength": 64}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._compile_naming()

    def on_enter(self, node, tag):
        if tag is EventTag.CREATE_TABLE:
            self._check(node, table_name(node.expression))
        else:
            for action in alter_actions(node.expression):
                if action.kind == "rename_table":
                    self._check(self.find_node(node, action.expression), action.new_table)

    def _check(self, node, table):
        if not table:
            return
        for violation in self._naming_violations(table):
            if violation == "pattern":
                message = (f"`{table}` mismatches table naming convention, "
                           f"naming format should be {json.dumps(self.pattern.pattern)}")
            else:
                message = (f"`{table}` mismatches table naming convention, "
                           f"its length should be within {self.max_length} characters")
            self.add_advice(Code.NAMING_TABLE_CONVENTION_MISMATCH, message, node)
