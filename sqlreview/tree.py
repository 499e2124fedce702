# sqlreview/tree.py
"""
Adapter from sqlglot expressions to the node shape the walker and the rules
consume: a concrete ``kind``, the wrapped ``expression``, ordered
``children``, a ``parent`` link and a statement-local 1-based ``line``.
"""
from typing import Iterator, List, Optional

from sqlglot import exp

SELECT_ITEM_LIST = "SelectItemList"

# DDL classes whose meaning depends on the object kind they act on.
_KINDED = frozenset({"Create", "Drop", "Alter"})


def node_kind(expression: exp.Expression) -> str:
    """Concrete kind string of a sqlglot expression, e.g. ``Create:TABLE``."""
    name = type(expression).__name__
    if isinstance(expression, exp.Func):
        return f"Func:{name}"
    if name in _KINDED:
        kind = expression.args.get("kind")
        if kind:
            return f"{name}:{str(kind).upper()}"
    return name


def _token_line(expression: exp.Expression) -> Optional[int]:
    line = expression.meta.get("line")
    return line if isinstance(line, int) and line > 0 else None


class SyntaxNode:
    __slots__ = ("kind", "expression", "children", "parent", "line", "dialect")

    def __init__(self, kind, expression, parent=None, line=None, dialect=None):
        self.kind: str = kind
        self.expression: exp.Expression = expression
        self.children: List["SyntaxNode"] = []
        self.parent: Optional["SyntaxNode"] = parent
        self.line: Optional[int] = line
        self.dialect = dialect

    @property
    def text(self) -> str:
        if self.kind == SELECT_ITEM_LIST:
            return ", ".join(child.text for child in self.children)
        return self.expression.sql(dialect=self.dialect)

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order iteration over this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self):
        return f"SyntaxNode({self.kind!r}, line={self.line})"


def _build(expression, parent, dialect) -> SyntaxNode:
    node = SyntaxNode(node_kind(expression), expression, parent=parent,
                      line=_token_line(expression), dialect=dialect)
    for key, value in expression.args.items():
        if isinstance(value, exp.Expression):
            node.children.append(_build(value, node, dialect))
        elif isinstance(value, list):
            items = [v for v in value if isinstance(v, exp.Expression)]
            if not items:
                continue
            if key == "expressions" and isinstance(expression, exp.Select):
                group = SyntaxNode(SELECT_ITEM_LIST, expression, parent=node, dialect=dialect)
                group.children = [_build(v, group, dialect) for v in items]
                group.line = _earliest(group.children)
                node.children.append(group)
            else:
                node.children.extend(_build(v, node, dialect) for v in items)

    if node.line is None:
        node.line = _earliest(node.children)
    return node


def _earliest(nodes) -> Optional[int]:
    lines = [n.line for n in nodes if n.line is not None]
    return min(lines) if lines else None


def build_tree(expression: exp.Expression, dialect=None) -> SyntaxNode:
    """Wrap a parsed statement; the root always sits on local line 1."""
    root = _build(expression, None, dialect)
    root.line = 1
    for node in root.walk():
        for child in node.children:
            if child.line is None:
                child.line = node.line
    return root
