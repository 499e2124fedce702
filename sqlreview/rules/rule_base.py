# sqlreview/rules/rule_base.py
"""
Base class for review rules.

A rule declares the event tags it wants on enter and on exit, receives the
matching nodes from the walker, and appends Advice through ``add_advice``.
Rules that look at the whole script report from ``finalize()``.
"""
from typing import Dict, FrozenSet, List, Optional

from ..advice import Advice, Severity, position
from ..catalog import ColumnTypeResolver
from ..errors import ConfigurationError
from ..events import EventTag, classify
from ..normalize import (
    alter_actions,
    column_defs,
    column_type,
    constraint_defs,
    drop_table_names,
    normalize_type,
    table_elements,
    table_name,
)
from ..parser import DEFAULT_DIALECT


class RuleBase:
    id = "base"
    rule_name = "Generic Rule"
    enter_tags: FrozenSet[EventTag] = frozenset()
    exit_tags: FrozenSet[EventTag] = frozenset()
    default_payload: Dict = {}

    def __init__(self, params: Dict = None, catalog=None, dialect: str = DEFAULT_DIALECT):
        self.params = params or {}
        self.catalog = catalog
        self.dialect = dialect
        self.title = self.params.get("rule_name") or self.rule_name
        try:
            self.severity = Severity.from_level(self.params.get("level", "ERROR"))
        except ValueError as e:
            raise ConfigurationError(self.id, str(e)) from e
        payload = self.params.get("payload") or {}
        if not isinstance(payload, dict):
            raise ConfigurationError(self.id, "payload must be an object")
        self.payload = {**self.default_payload, **payload}
        self.base_line = 0
        self.advice_list: List[Advice] = []

    def name(self) -> str:
        return type(self).__name__

    # ---- hooks ----
    def on_enter(self, node, tag: EventTag):
        pass

    def on_exit(self, node, tag: EventTag):
        pass

    def finalize(self):
        pass

    def set_base_line(self, base_line: int):
        self.base_line = base_line

    # ---- advice ----
    def line_of(self, node) -> int:
        """Script line of ``node`` in the statement being walked."""
        return position(self.base_line, node.line or 1)

    def add_advice(self, code, message: str, node=None, line: Optional[int] = None) -> Advice:
        """Record one advice at ``node`` or at an already resolved script ``line``."""
        if line is None:
            line = self.line_of(node) if node is not None else position(self.base_line, 1)
        advice = Advice(severity=self.severity, code=code, title=self.title,
                        message=message, line=line)
        self.advice_list.append(advice)
        return advice

    # ---- payload ----
    def payload_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.payload.get(key, default)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(self.id, f"payload field {key!r} must be a string")
        return value

    def payload_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.payload.get(key, default)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(self.id, f"payload field {key!r} must be an integer")
        return value

    def payload_list(self, key: str, default=None) -> List[str]:
        value = self.payload.get(key, default if default is not None else [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(self.id, f"payload field {key!r} must be a list of strings")
        return list(value)

    # ---- tree helpers ----
    @staticmethod
    def find_node(root, expression):
        """The node under ``root`` wrapping ``expression``, or ``root`` itself."""
        for node in root.walk():
            if node.expression is expression:
                return node
        return root

    @staticmethod
    def enclosing_table(node) -> str:
        """Name of the table a CREATE/ALTER TABLE ancestor of ``node`` targets."""
        current = node.parent
        while current is not None:
            if classify(current) in (EventTag.CREATE_TABLE, EventTag.ALTER_TABLE):
                return table_name(current.expression)
            current = current.parent
        return ""

    @staticmethod
    def statement_root(node):
        while node.parent is not None:
            node = node.parent
        return node


class ColumnTypeTrackingRule(RuleBase):
    """Rule that keeps the script-local column type overlay current.

    Subclasses get ``self.resolver`` updated on CREATE / ALTER / DROP TABLE
    before their own ``check_*`` hooks run, so a column added by an earlier
    statement resolves to its new type.
    """
    id = None
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.ALTER_TABLE,
                            EventTag.DROP_TABLE, EventTag.CREATE_INDEX})

    def __init__(self, params: Dict = None, catalog=None, dialect: str = DEFAULT_DIALECT):
        super().__init__(params, catalog=catalog, dialect=dialect)
        self.resolver = ColumnTypeResolver(catalog)

    def on_enter(self, node, tag):
        expression = node.expression
        if tag is EventTag.CREATE_TABLE:
            table = table_name(expression)
            self.resolver.overlay.drop_table(table)
            for column in column_defs(expression):
                self.resolver.overlay.set(table, column.name, column_type(column, self.dialect))
            self.check_create_table(node, table)
        elif tag is EventTag.ALTER_TABLE:
            table = table_name(expression)
            for action in alter_actions(expression):
                self._track_alter(table, action)
                self.check_alter_action(node, table, action)
        elif tag is EventTag.DROP_TABLE:
            for table in drop_table_names(expression):
                self.resolver.overlay.drop_table(table)
        elif tag is EventTag.CREATE_INDEX:
            self.check_create_index(node)

    def _track_alter(self, table, action):
        overlay = self.resolver.overlay
        if action.kind == "add_column":
            overlay.set(table, action.column, column_type(action.definition, self.dialect))
        elif action.kind == "modify_column" and action.data_type is not None:
            overlay.set(table, action.column, normalize_type(action.data_type, self.dialect))
        elif action.kind == "rename_column":
            new_type = column_type(action.definition, self.dialect) if action.definition is not None else None
            overlay.rename(table, action.column, action.new_column, new_type)
        elif action.kind == "drop_column":
            overlay.delete(table, action.column)

    def constraints_of(self, create_expression):
        return list(constraint_defs(table_elements(create_expression)))

    def check_create_table(self, node, table):
        pass

    def check_alter_action(self, node, table, action):
        pass

    def check_create_index(self, node):
        pass
