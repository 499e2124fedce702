# sqlreview/rules/table_drop_naming_convention_rule.py
"""
Only tables whose names match the configured pattern may be dropped.

Example (format ``_del$``):
  ✅ DROP TABLE orders_del;
  ❌ DROP TABLE orders;
"""
import json
import re

from ..advice import Code
from ..errors import ConfigurationError
from ..events import EventTag
from ..normalize import drop_table_names
from .rule_base import RuleBase


class TableDropNamingConventionRule(RuleBase):
    id = "table.drop-naming-convention"
    rule_name = "Drop table naming convention"
    enter_tags = frozenset({EventTag.DROP_TABLE})
    default_payload = {"format": "_del$"}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        fmt = self.payload_str("format")
        try:
            self.pattern = re.compile(fmt or "")
        except re.error as e:
            raise ConfigurationError(self.id, f"invalid format {fmt!r}: {e}") from e

    def on_enter(self, node, tag):
        for table in drop_table_names(node.expression):
            if not self.pattern.search(table):
                self.add_advice(
                    Code.TABLE_DROP_NAMING_CONVENTION_MISMATCH,
                    f"`{table}` mismatches drop table naming convention, "
                    f"naming format should be {json.dumps(self.pattern.pattern)}",
                    node,
                )
