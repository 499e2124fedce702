# sqlreview/events.py
"""
Semantic event tags and the classifier that maps a node's concrete kind to
one of them. Unknown kinds are UNINTERESTING, never an error.
"""
from enum import Enum

from .tree import SELECT_ITEM_LIST


class EventTag(Enum):
    UNINTERESTING = "Uninteresting"
    CREATE_TABLE = "CreateTable"
    ALTER_TABLE = "AlterTable"
    DROP_TABLE = "DropTable"
    CREATE_INDEX = "CreateIndex"
    DROP_INDEX = "DropIndex"
    CREATE_VIEW = "CreateView"
    CREATE_FUNCTION = "CreateFunction"
    CREATE_PROCEDURE = "CreateProcedure"
    CREATE_DATABASE = "CreateDatabase"
    COLUMN_DEFINITION = "ColumnDefinition"
    FUNCTION_CALL = "FunctionCall"
    QUERY = "Query"
    SELECT_ITEM_LIST = "SelectItemList"
    INSERT = "Insert"
    UPDATE = "Update"
    DELETE = "Delete"
    WHERE_CLAUSE = "WhereClause"
    LIKE_PREDICATE = "LikePredicate"
    COMMIT = "Commit"
    TRUNCATE_TABLE = "TruncateTable"
    COMMAND = "Command"


_KIND_TAGS = {
    "Create:TABLE": EventTag.CREATE_TABLE,
    "Create:INDEX": EventTag.CREATE_INDEX,
    "Create:VIEW": EventTag.CREATE_VIEW,
    "Create:FUNCTION": EventTag.CREATE_FUNCTION,
    "Create:PROCEDURE": EventTag.CREATE_PROCEDURE,
    "Create:DATABASE": EventTag.CREATE_DATABASE,
    "Create:SCHEMA": EventTag.CREATE_DATABASE,
    "Alter:TABLE": EventTag.ALTER_TABLE,
    # older sqlglot releases
    "AlterTable": EventTag.ALTER_TABLE,
    "Drop:TABLE": EventTag.DROP_TABLE,
    "Drop:INDEX": EventTag.DROP_INDEX,
    "ColumnDef": EventTag.COLUMN_DEFINITION,
    "Select": EventTag.QUERY,
    "Union": EventTag.QUERY,
    "Intersect": EventTag.QUERY,
    "Except": EventTag.QUERY,
    SELECT_ITEM_LIST: EventTag.SELECT_ITEM_LIST,
    "Insert": EventTag.INSERT,
    "Update": EventTag.UPDATE,
    "Delete": EventTag.DELETE,
    "Where": EventTag.WHERE_CLAUSE,
    "Like": EventTag.LIKE_PREDICATE,
    "ILike": EventTag.LIKE_PREDICATE,
    "Commit": EventTag.COMMIT,
    "TruncateTable": EventTag.TRUNCATE_TABLE,
    "Command": EventTag.COMMAND,
}


def classify(node) -> EventTag:
    kind = getattr(node, "kind", None)
    if not isinstance(kind, str):
        return EventTag.UNINTERESTING
    tag = _KIND_TAGS.get(kind)
    if tag is not None:
        return tag
    if kind.startswith("Func:"):
        return EventTag.FUNCTION_CALL
    return EventTag.UNINTERESTING
