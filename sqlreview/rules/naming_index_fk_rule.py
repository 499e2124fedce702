# sqlreview/rules/naming_index_fk_rule.py
"""
Foreign key names must follow the configured template.

The template may use {{referencing_table}}, {{referencing_column}},
{{referenced_table}} and {{referenced_column}}.
"""
from ..advice import Code
from ..naming import (
    FK_TEMPLATE_TOKENS,
    REFERENCED_COLUMN_TOKEN,
    REFERENCED_TABLE_TOKEN,
    REFERENCING_COLUMN_TOKEN,
    REFERENCING_TABLE_TOKEN,
)
from .naming_index_base import IndexNamingRuleBase


class NamingForeignKeyRule(IndexNamingRuleBase):
    id = "naming.index.fk"
    rule_name = "Foreign key naming convention"
    default_payload = {
        "format": "^fk_{{referencing_table}}_{{referencing_column}}_{{referenced_table}}_{{referenced_column}}$",
        "maxLength": 64,
    }
    index_kinds = ("foreign",)
    label = "Foreign key"
    code = Code.NAMING_FK_CONVENTION_MISMATCH
    tokens = FK_TEMPLATE_TOKENS

    def metadata(self, table, index):
        return {
            REFERENCING_TABLE_TOKEN: table,
            REFERENCING_COLUMN_TOKEN: "_".join(index.columns),
            REFERENCED_TABLE_TOKEN: index.referenced_table,
            REFERENCED_COLUMN_TOKEN: "_".join(index.referenced_columns),
        }
