# test/conftest.py
"""Shared fixtures: rule construction and a one-call review helper."""
from pathlib import Path

import pytest

from sqlreview.catalog import InMemoryCatalog
from sqlreview.reviewer import ReviewContext, check

ROOT = Path(__file__).resolve().parent.parent
CHECKS_PATH = ROOT / "config" / "checks.json"


@pytest.fixture
def checks_path():
    return str(CHECKS_PATH)


@pytest.fixture
def make_rule():
    def _make(cls, payload=None, level="ERROR", catalog=None, dialect="mysql"):
        params = {"level": level}
        if payload is not None:
            params["payload"] = payload
        return cls(params, catalog=catalog, dialect=dialect)
    return _make


@pytest.fixture
def review():
    """review(script, *rules) -> (advices, error)"""
    def _review(script, *rules, dialect="mysql", catalog=None, cancel_event=None):
        context = ReviewContext(dialect=dialect, catalog=catalog, cancel_event=cancel_event)
        return check(script, list(rules), context)
    return _review


@pytest.fixture
def orders_catalog():
    return InMemoryCatalog.from_dict({
        "tables": {
            "orders": {
                "columns": {"id": "bigint", "code": "varchar(10)", "note": "text"},
                "indexes": [{"name": "PRIMARY", "columns": ["id"], "primary": True}],
            }
        }
    })
