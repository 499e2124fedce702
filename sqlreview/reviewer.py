# sqlreview/reviewer.py
"""
Review driver: parse a script, walk every statement once with all rules,
finalize, and hand back the merged advice.

    advices, error = check(script, rules, ReviewContext(dialect="mysql"))

``error`` is None, RuleErrors (some rules failed, the rest still reported)
or ReviewCancelled (advice covers the statements walked so far). A script
that does not parse yields a single syntax-error advice and no error.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from .advice import Advice, Code, Severity, syntax_error_advice
from .catalog import Catalog
from .engine import DEFAULT_CHECKS_PATH, RuleEngine
from .errors import ReviewCancelled, RuleErrors, SQLSyntaxError
from .parser import DEFAULT_DIALECT, parse_script
from .walker import Walker

logger = logging.getLogger(__name__)


@dataclass
class ReviewContext:
    dialect: str = DEFAULT_DIALECT
    catalog: Optional[Catalog] = None
    cancel_event: Optional[threading.Event] = None

    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


def check(script: str, rules, context: Optional[ReviewContext] = None):
    """Review ``script`` with ``rules``; returns ``(advices, error)``."""
    context = context or ReviewContext()
    try:
        statements = parse_script(script, dialect=context.dialect)
    except SQLSyntaxError as e:
        logger.info("syntax error at line %s: %s", e.line, e.message, extra={"line": e.line})
        return [syntax_error_advice(e)], None

    walker = Walker(rules)
    for parsed in statements:
        if context.cancelled():
            logger.info("review cancelled before statement %d", parsed.statement.index,
                        extra={"statement": parsed.statement.index})
            return walker.advice(), ReviewCancelled(
                f"cancelled after {parsed.statement.index} statement(s)")
        logger.debug("walking statement %d (base line %d)", parsed.statement.index, parsed.base_line,
                     extra={"statement": parsed.statement.index, "line": parsed.base_line + 1})
        walker.set_base_line(parsed.base_line)
        walker.walk(parsed.root)
    walker.finalize()

    errors = walker.errors
    return walker.advice(), (RuleErrors(errors) if errors else None)


@dataclass
class ReviewResult:
    advices: List[Advice] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def summary(self):
        return {
            "total": len(self.advices),
            "errors": sum(1 for a in self.advices if a.severity is Severity.ERROR),
            "warnings": sum(1 for a in self.advices if a.severity is Severity.WARNING),
            "infos": sum(1 for a in self.advices if a.severity is Severity.INFO),
        }

    @property
    def rule_errors(self):
        if isinstance(self.error, RuleErrors):
            return self.error.errors
        return []

    def has_errors(self) -> bool:
        return any(a.severity is Severity.ERROR for a in self.advices)

    def has_warnings(self) -> bool:
        return any(a.severity is Severity.WARNING for a in self.advices)

    def is_clean(self) -> bool:
        return not self.advices and self.error is None

    def filter_by_severity(self, severity) -> List[Advice]:
        severity = Severity.from_level(severity)
        return [a for a in self.advices if a.severity is severity]

    def filter_by_code(self, code) -> List[Advice]:
        code = Code(code)
        return [a for a in self.advices if a.code is code]

    def to_dict(self) -> dict:
        return {
            "advices": [a.to_dict() for a in self.advices],
            "summary": self.summary,
            "errors": [str(e) for e in self.rule_errors],
            "cancelled": isinstance(self.error, ReviewCancelled),
        }


def review_sql_text(text, checks_path=DEFAULT_CHECKS_PATH, catalog=None,
                    dialect=DEFAULT_DIALECT, cancel_event=None, engine=None) -> ReviewResult:
    """
    Load the configured rules and review one script. Returns a ReviewResult.
    """
    engine = engine or RuleEngine(checks_config_path=checks_path)
    rules = engine.build_rules(catalog=catalog, dialect=dialect)
    context = ReviewContext(dialect=dialect, catalog=catalog, cancel_event=cancel_event)
    advices, error = check(text, rules, context)
    return ReviewResult(advices=advices, error=error)
