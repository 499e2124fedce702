# sqlreview/parser.py
"""
Script splitter and grammar adapter.

Key design decisions:
- Remove block and line comments but keep every newline, so offsets in the
  cleaned text still map to the original script lines.
- Tokenize on top-level semicolons while preserving quoted strings and
  identifiers ('...', "...", `...`).
- Each statement records ``base_line``: the number of script lines before its
  first token. Statement text is stripped, so its first token sits on local
  line 1 and every local line converts with ``advice.position``.
- Parsing is delegated to sqlglot; a parse failure becomes SQLSyntaxError with
  a script-absolute line.
"""
import logging
from dataclasses import dataclass
from typing import List

import sqlglot
from sqlglot.errors import ParseError, TokenError

from .advice import position
from .errors import SQLSyntaxError
from .tree import SyntaxNode, build_tree

logger = logging.getLogger(__name__)

DEFAULT_DIALECT = "mysql"

_QUOTES = ("'", '"', "`")


@dataclass(frozen=True)
class Statement:
    index: int
    text: str
    base_line: int


@dataclass
class ParsedStatement:
    statement: Statement
    root: SyntaxNode

    @property
    def base_line(self):
        return self.statement.base_line


# -------------------------
# Comment removal
# -------------------------
def _remove_block_comments(text: str) -> str:
    # Replace block comment with same number of newline chars to preserve line numbers.
    # /* inside a quoted string is literal text.
    out = []
    i = 0
    L = len(text)
    while i < L:
        ch = text[i]
        if ch in _QUOTES:
            end = _skip_quoted(text, i)
            out.append(text[i:end])
            i = end
            continue
        if text.startswith('--', i):
            # line comments are left for _remove_line_comments
            end = text.find('\n', i)
            end = L if end == -1 else end
            out.append(text[i:end])
            i = end
            continue
        if text.startswith('/*', i):
            close = text.find('*/', i + 2)
            end = L if close == -1 else close + 2
            out.append('\n' * text.count('\n', i, end))
            i = end
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _skip_quoted(text: str, i: int) -> int:
    """Offset just past the quoted string opening at ``text[i]``."""
    quote = text[i]
    i += 1
    L = len(text)
    while i < L:
        # doubled quote is an escaped quote
        if text[i] == quote and i + 1 < L and text[i + 1] == quote:
            i += 2
            continue
        if text[i] == '\\' and quote == "'":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return L


def _remove_line_comments(text: str) -> str:
    # Remove -- comments unless inside quotes
    out_lines = []
    for line in text.splitlines():
        quote = None
        keep_pos = len(line)
        for i, ch in enumerate(line):
            if quote:
                if ch == quote:
                    quote = None
                continue
            if ch in _QUOTES:
                quote = ch
            elif ch == '-' and line[i + 1:i + 2] == '-':
                keep_pos = i
                break
        out_lines.append(line[:keep_pos])
    return "\n".join(out_lines)


# -------------------------
# Top-level tokenizer (split on semicolons, respect quoted strings)
# -------------------------
def _tokenize_top_level(text: str):
    """Yield (chunk, start_offset) for every top-level ;-terminated chunk."""
    start = 0
    i = 0
    L = len(text)
    while i < L:
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_quoted(text, i)
            continue

        if ch == ';':
            yield text[start:i + 1], start
            start = i + 1
        i += 1

    if text[start:].strip():
        yield text[start:], start


# -------------------------
# Public API
# -------------------------
def split_sql_statements(text: str) -> List[Statement]:
    """Split a script into statements, each tagged with its line offset."""
    if not text:
        return []

    txt = text.replace('\r\n', '\n').replace('\r', '\n')
    txt = _remove_block_comments(txt)
    txt = _remove_line_comments(txt)

    statements = []
    for chunk, offset in _tokenize_top_level(txt):
        body = chunk.strip()
        if not body or body == ';':
            continue
        leading = len(chunk) - len(chunk.lstrip())
        base_line = txt.count('\n', 0, offset + leading)
        statements.append(Statement(index=len(statements), text=body, base_line=base_line))
    return statements


def parse_statement(statement: Statement, dialect: str = DEFAULT_DIALECT) -> ParsedStatement:
    sql = statement.text.rstrip(';').rstrip()
    try:
        expression = sqlglot.parse_one(sql, read=dialect)
    except ParseError as e:
        detail = e.errors[0] if e.errors else {}
        local_line = detail.get("line") or 1
        raise SQLSyntaxError(
            detail.get("description") or str(e),
            line=position(statement.base_line, local_line),
            column=detail.get("col"),
        ) from e
    except TokenError as e:
        raise SQLSyntaxError(str(e), line=position(statement.base_line, 1)) from e

    if expression is None:
        raise SQLSyntaxError("empty statement", line=position(statement.base_line, 1))
    return ParsedStatement(statement=statement, root=build_tree(expression, dialect=dialect))


def parse_script(text: str, dialect: str = DEFAULT_DIALECT) -> List[ParsedStatement]:
    """Split and parse a whole script; the first syntax error aborts."""
    parsed = []
    for statement in split_sql_statements(text):
        logger.debug("parsing statement %d at base line %d", statement.index, statement.base_line)
        parsed.append(parse_statement(statement, dialect=dialect))
    return parsed
