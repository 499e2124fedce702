# sqlreview/naming.py
"""
Naming-template compiler.

A format such as ``^idx_{{table}}_{{column_list}}$`` is expanded with the
metadata of one occurrence (missing keys expand to "") and compiled into a
regular expression. Matching uses ``re.search``; anchor the format to require
a full match.
"""
import re
from typing import Dict, Iterable, List, Optional

from .errors import TemplateError

TABLE_NAME_TOKEN = "{{table}}"
COLUMN_LIST_TOKEN = "{{column_list}}"
REFERENCING_TABLE_TOKEN = "{{referencing_table}}"
REFERENCING_COLUMN_TOKEN = "{{referencing_column}}"
REFERENCED_TABLE_TOKEN = "{{referenced_table}}"
REFERENCED_COLUMN_TOKEN = "{{referenced_column}}"

INDEX_TEMPLATE_TOKENS = (TABLE_NAME_TOKEN, COLUMN_LIST_TOKEN)
FK_TEMPLATE_TOKENS = (
    REFERENCING_TABLE_TOKEN,
    REFERENCING_COLUMN_TOKEN,
    REFERENCED_TABLE_TOKEN,
    REFERENCED_COLUMN_TOKEN,
)

# Postgres truncates identifiers past 63 chars; MySQL allows 64.
DEFAULT_NAME_LENGTH_LIMIT = 63


def expand_template(fmt: str, metadata: Dict[str, str], tokens: Iterable[str]) -> str:
    expanded = fmt
    for token in tokens:
        expanded = expanded.replace(token, metadata.get(token, ""))
    return expanded


def compile_template(fmt: str, metadata: Dict[str, str], tokens: Iterable[str]):
    expanded = expand_template(fmt, metadata, tokens)
    try:
        return re.compile(expanded)
    except re.error as e:
        raise TemplateError(f"invalid naming pattern {expanded!r}: {e}") from e


class NamingTemplate:
    """A configured naming convention: format, placeholder tokens, max length."""

    def __init__(self, fmt: str, tokens: Iterable[str] = INDEX_TEMPLATE_TOKENS,
                 max_length: int = DEFAULT_NAME_LENGTH_LIMIT):
        self.format = fmt
        self.tokens = tuple(tokens)
        self.max_length = max_length
        # fail at configuration time when the format is broken on its own
        compile_template(fmt, {}, self.tokens)

    def pattern(self, metadata: Dict[str, str]):
        return compile_template(self.format, metadata, self.tokens)

    def mismatch(self, name: str, metadata: Dict[str, str]) -> Optional[str]:
        """Return the expanded pattern when ``name`` does not match it."""
        regex = self.pattern(metadata)
        if regex.search(name or ""):
            return None
        return regex.pattern

    def too_long(self, name: str) -> bool:
        return self.max_length > 0 and len(name or "") > self.max_length

    def violations(self, name: str, metadata: Dict[str, str]) -> List[str]:
        """Names of the violated dimensions: "pattern" and/or "length"."""
        found = []
        if self.mismatch(name, metadata) is not None:
            found.append("pattern")
        if self.too_long(name):
            found.append("length")
        return found
