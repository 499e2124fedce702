# sqlreview/advice.py
"""
Advice records produced by rules, plus the one place that turns a
statement-local line into a script line.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Severity(IntEnum):
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def from_level(cls, level):
        """Map a configured level string ("error", "WARNING", ...) to a Severity."""
        if isinstance(level, Severity):
            return level
        try:
            return cls[str(level).strip().upper()]
        except KeyError:
            raise ValueError(f"unexpected rule level: {level!r}") from None


class Code(IntEnum):
    INTERNAL = 1

    STATEMENT_SYNTAX_ERROR = 201
    STATEMENT_NO_WHERE = 202
    STATEMENT_SELECT_ALL = 203
    STATEMENT_LEADING_WILDCARD_LIKE = 204
    STATEMENT_DISALLOW_COMMIT = 206

    NAMING_TABLE_CONVENTION_MISMATCH = 301
    NAMING_COLUMN_CONVENTION_MISMATCH = 302
    NAMING_INDEX_CONVENTION_MISMATCH = 303
    NAMING_UK_CONVENTION_MISMATCH = 304
    NAMING_FK_CONVENTION_MISMATCH = 305

    COLUMN_REQUIRED = 401
    COLUMN_CANNOT_NULL = 402
    COLUMN_NOT_NULL_NO_DEFAULT = 404
    DISABLED_COLUMN_TYPE = 411
    COLUMN_REQUIRE_DEFAULT = 420

    TABLE_REQUIRE_PK = 601
    TABLE_HAS_FK = 602
    TABLE_DROP_NAMING_CONVENTION_MISMATCH = 603

    INDEX_PK_TYPE = 803
    INDEX_TYPE_NO_BLOB = 804

    INSERT_NOT_SPECIFY_COLUMN = 1107
    DISABLED_FUNCTION = 1702


SYNTAX_ERROR_TITLE = "Syntax error"


def position(base_line: int, local_line: int) -> int:
    """Script line of a construct found on ``local_line`` of a statement.

    ``base_line`` is the number of script lines before the statement's first
    line and ``local_line`` is 1-based, so the first line of the first
    statement is line 1.
    """
    return base_line + local_line


@dataclass(frozen=True)
class Advice:
    severity: Severity
    code: Code
    title: str
    message: str
    line: int
    column: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "severity": self.severity.name,
            "code": int(self.code),
            "title": self.title,
            "message": self.message,
            "line": self.line,
        }
        if self.column is not None:
            data["column"] = self.column
        return data

    def __str__(self):
        return f"[{self.severity.name}] line {self.line}: {self.title}: {self.message}"


def syntax_error_advice(err) -> Advice:
    """Turn an SQLSyntaxError into the single advice reported for the script."""
    return Advice(
        severity=Severity.ERROR,
        code=Code.STATEMENT_SYNTAX_ERROR,
        title=SYNTAX_ERROR_TITLE,
        message=err.message,
        line=err.line or 1,
        column=err.column,
    )
