# sqlreview/rules/naming_index_idx_rule.py
"""
Regular (non-unique) index names must follow the configured template.

Example (format ``^idx_{{table}}_{{column_list}}$``):
  ✅ CREATE INDEX idx_orders_customer_id ON orders (customer_id);
  ❌ CREATE INDEX ix_orders_customer_id ON orders (customer_id);
"""
from ..advice import Code
from .naming_index_base import IndexNamingRuleBase


class NamingIndexRule(IndexNamingRuleBase):
    id = "naming.index.idx"
    rule_name = "Index naming convention"
    default_payload = {"format": "^idx_{{table}}_{{column_list}}$", "maxLength": 64}
    index_kinds = ("index",)
    label = "Index"
    code = Code.NAMING_INDEX_CONVENTION_MISMATCH
