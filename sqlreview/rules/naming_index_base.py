# sqlreview/rules/naming_index_base.py
"""
Shared checks for the index / unique key / foreign key naming rules.

Each occurrence is matched against the configured template, expanded with
that occurrence's table and columns, and against the maximum name length.
A template that expands into an invalid pattern skips only that occurrence.
"""
import json
import logging

from ..errors import ConfigurationError, TemplateError
from ..events import EventTag
from ..naming import (
    COLUMN_LIST_TOKEN,
    DEFAULT_NAME_LENGTH_LIMIT,
    INDEX_TEMPLATE_TOKENS,
    TABLE_NAME_TOKEN,
    NamingTemplate,
)
from ..normalize import (
    alter_actions,
    constraint_defs,
    create_index_def,
    create_index_table,
    table_elements,
    table_name,
)
from .rule_base import RuleBase

logger = logging.getLogger(__name__)


class IndexNamingRuleBase(RuleBase):
    id = None
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE, EventTag.CREATE_INDEX})
    index_kinds = ()
    label = "Index"
    code = None
    tokens = INDEX_TEMPLATE_TOKENS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        fmt = self.payload_str("format")
        if not fmt:
            raise ConfigurationError(self.id, "payload field 'format' is required")
        max_length = self.payload_int("maxLength", DEFAULT_NAME_LENGTH_LIMIT)
        try:
            self.template = NamingTemplate(fmt, self.tokens, max_length)
        except TemplateError as e:
            raise ConfigurationError(self.id, str(e)) from e

    def metadata(self, table, index):
        return {
            TABLE_NAME_TOKEN: table,
            COLUMN_LIST_TOKEN: "_".join(index.columns),
        }

    def on_enter(self, node, tag):
        expression = node.expression
        if tag is EventTag.CREATE_TABLE:
            table = table_name(expression)
            for index in constraint_defs(table_elements(expression)):
                self._check(node, table, index)
        elif tag is EventTag.ALTER_TABLE:
            table = table_name(expression)
            for action in alter_actions(expression):
                for index in action.constraints:
                    self._check(node, table, index)
        elif tag is EventTag.CREATE_INDEX:
            index = create_index_def(expression)
            if index is not None:
                self._check(node, create_index_table(expression), index)

    def _check(self, node, table, index):
        if index.kind not in self.index_kinds or not index.name:
            return
        at = self.find_node(node, index.expression)
        try:
            expected = self.template.mismatch(index.name, self.metadata(table, index))
        except TemplateError as e:
            logger.info("%s: skipping %s on %s: %s", self.id, index.name, table, e)
            return
        if expected is not None:
            self.add_advice(
                self.code,
                f"{self.label} in table `{table}` mismatches the naming convention, "
                f"expect {json.dumps(expected)} but found `{index.name}`",
                at,
            )
        if self.template.too_long(index.name):
            self.add_advice(
                self.code,
                f"{self.label} `{index.name}` in table `{table}` mismatches the naming convention, "
                f"its length should be within {self.template.max_length} characters",
                at,
            )
