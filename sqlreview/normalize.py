# sqlreview/normalize.py
"""
Helpers that read names, types and constraints out of sqlglot expressions.

Rules call these instead of poking at expression args directly, so grammar
shape differences stay in one module.
"""
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from sqlglot import exp


@dataclass
class IndexDef:
    name: str
    kind: str  # primary | unique | index | fulltext | spatial | foreign
    columns: List[str]
    referenced_table: str = ""
    referenced_columns: List[str] = field(default_factory=list)
    expression: Optional[exp.Expression] = None


@dataclass
class AlterAction:
    kind: str  # add_column | drop_column | rename_column | modify_column | add_constraint | rename_table | other
    column: str = ""
    new_column: str = ""
    new_table: str = ""
    definition: Optional[exp.ColumnDef] = None
    data_type: Optional[exp.DataType] = None
    constraints: List[IndexDef] = field(default_factory=list)
    expression: Optional[exp.Expression] = None


def identifier_name(expression) -> str:
    """Bare name of a Column / Identifier / Table / Ordered expression."""
    while isinstance(expression, (exp.Ordered, exp.Paren)):
        expression = expression.this
    if expression is None:
        return ""
    if isinstance(expression, str):
        return expression
    return expression.name


def column_names(expressions) -> List[str]:
    return [name for name in (identifier_name(e) for e in expressions or []) if name]


# -------------------------
# Tables
# -------------------------
def table_name(expression) -> str:
    """Table name targeted by a CREATE/ALTER/DROP/INSERT/... expression."""
    this = expression.this if not isinstance(expression, exp.Table) else expression
    if isinstance(this, exp.Schema):
        this = this.this
    if isinstance(this, exp.Table):
        return this.name
    if this is not None:
        found = this.find(exp.Table)
        if found is not None:
            return found.name
    return ""


def drop_targets(drop: exp.Drop) -> List[exp.Expression]:
    """Objects named by a DROP, whether sqlglot keeps them in ``tables`` or ``this``."""
    targets = list(drop.args.get("tables") or [])
    if drop.args.get("this") is not None:
        targets.insert(0, drop.args["this"])
    return targets


def drop_table_names(drop: exp.Drop) -> List[str]:
    names = [table_name(t) for t in drop_targets(drop)]
    return list(dict.fromkeys(n for n in names if n))


def table_elements(create: exp.Create) -> List[exp.Expression]:
    schema = create.this
    if isinstance(schema, exp.Schema):
        return list(schema.expressions)
    return []


def column_defs(create: exp.Create) -> List[exp.ColumnDef]:
    return [e for e in table_elements(create) if isinstance(e, exp.ColumnDef)]


# -------------------------
# Columns
# -------------------------
def normalize_type(data_type, dialect=None) -> Optional[str]:
    if data_type is None:
        return None
    if isinstance(data_type, str):
        return data_type.strip().lower()
    return data_type.sql(dialect=dialect).lower()


def base_type(type_string: str) -> str:
    """``varchar(20)`` -> ``varchar``; ``int unsigned`` -> ``int``."""
    return re.split(r"[\s(]", type_string.strip(), maxsplit=1)[0] if type_string else ""


def column_type(column: exp.ColumnDef, dialect=None) -> Optional[str]:
    return normalize_type(column.args.get("kind"), dialect)


def column_constraint_kinds(column: exp.ColumnDef) -> List[exp.Expression]:
    kinds = []
    for constraint in column.args.get("constraints") or []:
        kind = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint
        if kind is not None:
            kinds.append(kind)
    return kinds


def is_primary_key_column(column: exp.ColumnDef) -> bool:
    return any(isinstance(k, exp.PrimaryKeyColumnConstraint) for k in column_constraint_kinds(column))


def is_not_null(column: exp.ColumnDef) -> bool:
    for kind in column_constraint_kinds(column):
        if isinstance(kind, exp.NotNullColumnConstraint) and not kind.args.get("allow_null"):
            return True
    return is_primary_key_column(column)


def has_default(column: exp.ColumnDef) -> bool:
    return any(isinstance(k, exp.DefaultColumnConstraint) for k in column_constraint_kinds(column))


def is_auto_increment(column: exp.ColumnDef, dialect=None) -> bool:
    for kind in column_constraint_kinds(column):
        if isinstance(kind, (exp.AutoIncrementColumnConstraint, exp.GeneratedAsIdentityColumnConstraint)):
            return True
    return base_type(column_type(column, dialect) or "") in ("serial", "bigserial", "smallserial")


# -------------------------
# Constraints and indexes
# -------------------------
def _constraint_def(c, name) -> Optional[IndexDef]:
    if isinstance(c, exp.PrimaryKey):
        return IndexDef(name or "", "primary", column_names(c.expressions), expression=c)
    if isinstance(c, exp.ForeignKey):
        ref_table, ref_columns = "", []
        reference = c.args.get("reference")
        target = reference.this if reference is not None else None
        if isinstance(target, exp.Schema):
            ref_table = table_name(target)
            ref_columns = column_names(target.expressions)
        elif isinstance(target, exp.Table):
            ref_table = target.name
        return IndexDef(name or "", "foreign", column_names(c.expressions),
                        referenced_table=ref_table, referenced_columns=ref_columns, expression=c)
    if isinstance(c, exp.UniqueColumnConstraint):
        this = c.this
        columns = []
        if isinstance(this, exp.Schema):
            if not name and this.this is not None:
                name = identifier_name(this.this)
            columns = column_names(this.expressions)
        return IndexDef(name or "", "unique", columns, expression=c)
    if isinstance(c, exp.IndexColumnConstraint):
        kind = str(c.args.get("kind") or "").upper()
        kind = {"FULLTEXT": "fulltext", "SPATIAL": "spatial", "UNIQUE": "unique"}.get(kind, "index")
        return IndexDef(name or identifier_name(c.this), kind, column_names(c.expressions), expression=c)
    return None


def constraint_defs(expressions) -> Iterator[IndexDef]:
    """Table-level keys and indexes found in CREATE TABLE / ALTER ADD lists."""
    for item in expressions or []:
        if isinstance(item, exp.Constraint):
            for inner in item.expressions:
                found = _constraint_def(inner, identifier_name(item.this))
                if found is not None:
                    yield found
        else:
            found = _constraint_def(item, None)
            if found is not None:
                yield found


def create_index_def(create: exp.Create) -> Optional[IndexDef]:
    """Index described by CREATE [UNIQUE] INDEX ... ON t (cols)."""
    index = create.this
    if not isinstance(index, exp.Index):
        return None
    params = index.args.get("params")
    columns = params.args.get("columns") if params is not None else None
    if columns is None:
        columns = index.args.get("columns")
    unique = bool(create.args.get("unique") or index.args.get("unique"))
    kind = "unique" if unique else "index"
    return IndexDef(identifier_name(index.this), kind, column_names(columns), expression=index)


def create_index_table(create: exp.Create) -> str:
    index = create.this
    table = index.args.get("table") if isinstance(index, exp.Index) else None
    return table.name if isinstance(table, exp.Table) else ""


# -------------------------
# ALTER TABLE
# -------------------------
def alter_actions(alter: exp.Expression) -> Iterator[AlterAction]:
    for action in alter.args.get("actions") or []:
        if isinstance(action, exp.ColumnDef):
            yield AlterAction("add_column", column=action.name, definition=action,
                              data_type=action.args.get("kind"), expression=action)
        elif isinstance(action, exp.Drop):
            if str(action.args.get("kind") or "").upper() == "COLUMN":
                for target in drop_targets(action):
                    yield AlterAction("drop_column", column=identifier_name(target), expression=action)
            else:
                yield AlterAction("other", expression=action)
        elif isinstance(action, exp.ModifyColumn):
            # MySQL MODIFY col def / CHANGE old new def
            definition = action.this
            old = identifier_name(action.args.get("rename_from"))
            if old:
                yield AlterAction("rename_column", column=old, new_column=definition.name,
                                  definition=definition, data_type=definition.args.get("kind"),
                                  expression=action)
            else:
                yield AlterAction("modify_column", column=definition.name, definition=definition,
                                  data_type=definition.args.get("kind"), expression=action)
        elif isinstance(action, exp.RenameColumn):
            yield AlterAction("rename_column", column=identifier_name(action.this),
                              new_column=identifier_name(action.args.get("to")), expression=action)
        elif isinstance(action, exp.AlterColumn):
            yield AlterAction("modify_column", column=identifier_name(action.this),
                              data_type=action.args.get("dtype"), expression=action)
        elif type(action).__name__ in ("AlterRename", "RenameTable"):
            yield AlterAction("rename_table", new_table=table_name(action.this), expression=action)
        elif isinstance(action, exp.AddConstraint):
            yield AlterAction("add_constraint", constraints=list(constraint_defs(action.expressions)),
                              expression=action)
        elif isinstance(action, (exp.Constraint, exp.PrimaryKey, exp.ForeignKey,
                                 exp.UniqueColumnConstraint, exp.IndexColumnConstraint)):
            yield AlterAction("add_constraint", constraints=list(constraint_defs([action])),
                              expression=action)
        else:
            yield AlterAction("other", expression=action)


# -------------------------
# Functions
# -------------------------
def function_names(func: exp.Func, dialect=None) -> List[str]:
    """Upper-cased names a function call may be configured by."""
    names = []
    if isinstance(func, exp.Anonymous):
        names.append(func.name.upper())
    else:
        names.append(func.sql_name().upper())
        rendered = func.sql(dialect=dialect).split("(", 1)[0].strip().upper()
        if rendered and rendered not in names:
            names.append(rendered)
    return names
