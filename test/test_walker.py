# test/test_walker.py
"""Single-pass dispatch, rule isolation and advice ordering."""
import logging

from sqlreview.advice import Code, position
from sqlreview.errors import RuleErrors
from sqlreview.events import EventTag
from sqlreview.rules.column_no_null_rule import ColumnNoNullRule
from sqlreview.rules.rule_base import RuleBase
from sqlreview.tree import SyntaxNode
from sqlreview.walker import Walker


class RecordingRule(RuleBase):
    id = None
    enter_tags = frozenset({EventTag.CREATE_TABLE, EventTag.COLUMN_DEFINITION})
    exit_tags = frozenset({EventTag.CREATE_TABLE})

    def __init__(self, label="rec"):
        super().__init__({"level": "WARNING"})
        self.label = label
        self.events = []

    def on_enter(self, node, tag):
        self.events.append(("enter", tag))
        if tag is EventTag.CREATE_TABLE:
            self.add_advice(Code.INTERNAL, self.label, node)

    def on_exit(self, node, tag):
        self.events.append(("exit", tag))


class CrashRule(RuleBase):
    id = None
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION})

    def on_enter(self, node, tag):
        raise RuntimeError("boom")


class LineRule(RuleBase):
    id = None
    enter_tags = frozenset({EventTag.COLUMN_DEFINITION})

    def on_enter(self, node, tag):
        self.add_advice(Code.INTERNAL, "column", node)


def _synthetic_tree():
    root = SyntaxNode("Create:TABLE", None, line=1)
    column = SyntaxNode("ColumnDef", None, parent=root, line=2)
    root.children.append(column)
    return root


class TestDispatch:

    def test_enter_and_exit_order(self):
        rule = RecordingRule()
        walker = Walker([rule])
        walker.walk(_synthetic_tree())
        assert rule.events == [
            ("enter", EventTag.CREATE_TABLE),
            ("enter", EventTag.COLUMN_DEFINITION),
            ("exit", EventTag.CREATE_TABLE),
        ]

    def test_rules_only_see_declared_tags(self):
        rule = CrashRule({})
        walker = Walker([rule])
        walker.walk(SyntaxNode("Create:TABLE", None, line=1))
        assert walker.errors == []

    def test_position_is_base_plus_local(self):
        assert position(4, 2) == 6
        rule = LineRule({})
        walker = Walker([rule])
        walker.set_base_line(4)
        walker.walk(_synthetic_tree())
        assert [a.line for a in walker.advice()] == [6]

    def test_advice_merged_in_rule_order_per_node(self):
        first, second = RecordingRule("first"), RecordingRule("second")
        walker = Walker([first, second])
        walker.walk(_synthetic_tree())
        walker.walk(_synthetic_tree())
        walker.finalize()
        assert [a.message for a in walker.advice()] == ["first", "second", "first", "second"]


class TestIsolation:

    def test_failing_rule_does_not_block_others(self, review, make_rule):
        advices, error = review(
            "CREATE TABLE t (id INT PRIMARY KEY, name VARCHAR(10));",
            CrashRule({}),
            make_rule(ColumnNoNullRule),
        )
        assert len(advices) == 1
        assert "`t`.`name`" in advices[0].message
        assert isinstance(error, RuleErrors)
        assert [e.rule_name for e in error.errors] == ["CrashRule"]
        assert isinstance(error.errors[0].cause, RuntimeError)

    def test_failure_log_carries_rule_and_tag(self, review, caplog):
        with caplog.at_level(logging.WARNING, logger="sqlreview.walker"):
            review("CREATE TABLE t (id INT);", CrashRule({}))
        records = [r for r in caplog.records if r.name == "sqlreview.walker"]
        assert len(records) == 1
        assert records[0].rule == "CrashRule"
        assert records[0].tag == EventTag.COLUMN_DEFINITION.value

    def test_failing_rule_is_disabled_for_the_rest_of_the_script(self):
        crash = CrashRule({})
        walker = Walker([crash])
        walker.walk(_synthetic_tree())
        walker.walk(_synthetic_tree())
        walker.finalize()
        assert len(walker.errors) == 1
