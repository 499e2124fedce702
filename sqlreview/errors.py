# sqlreview/errors.py
"""
Exception types raised or returned by the review engine.

Only script-level failures (syntax errors, cancellation) stop a review.
Rule failures are wrapped in RuleError and aggregated into RuleErrors so the
caller still receives the advice the other rules produced.
"""


class ReviewError(Exception):
    """Base class for every error raised by sqlreview."""


class ConfigurationError(ReviewError):
    """A rule could not be built from its configuration payload."""

    def __init__(self, rule_id, message):
        self.rule_id = rule_id
        super().__init__(f"{rule_id}: {message}")


class TemplateError(ReviewError):
    """A naming template expanded into an invalid regular expression."""


class SQLSyntaxError(ReviewError):
    """The grammar could not parse a statement.

    ``line`` is the 1-based line in the whole script, not in the statement.
    """

    def __init__(self, message, line=None, column=None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)


class RuleError(ReviewError):
    """A rule hook failed while handling one syntax node."""

    def __init__(self, rule_name, tag, cause):
        self.rule_name = rule_name
        self.tag = tag
        self.cause = cause
        super().__init__(f"rule {rule_name} failed on {tag}: {cause}")


class RuleErrors(ReviewError):
    """Every RuleError collected during one check call."""

    def __init__(self, errors):
        self.errors = list(errors)
        names = ", ".join(e.rule_name for e in self.errors)
        super().__init__(f"{len(self.errors)} rule(s) failed: {names}")


class ReviewCancelled(ReviewError):
    """The caller cancelled the review between two statements."""
