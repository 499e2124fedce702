# sqlreview/rules/naming_index_uk_rule.py
"""Unique key names must follow the configured template."""
from ..advice import Code
from .naming_index_base import IndexNamingRuleBase


class NamingUniqueKeyRule(IndexNamingRuleBase):
    id = "naming.index.uk"
    rule_name = "Unique key naming convention"
    default_payload = {"format": "^uk_{{table}}_{{column_list}}$", "maxLength": 64}
    index_kinds = ("unique",)
    label = "Unique key"
    code = Code.NAMING_UK_CONVENTION_MISMATCH
