# test/test_column_required.py
"""Cross-statement required-columns tracking."""
import pytest

from sqlreview.advice import Code
from sqlreview.rules.column_required_rule import ColumnRequiredRule

REQUIRED = {"list": ["id", "created_ts", "updated_ts"]}


@pytest.fixture
def rule(make_rule):
    return make_rule(ColumnRequiredRule, REQUIRED)


def _messages(advices):
    return [a.message for a in advices]


class TestCreateTable:

    def test_missing_columns_sorted_in_one_advice(self, review, rule):
        advices, error = review("CREATE TABLE t (name TEXT, id INT);", rule)
        assert error is None
        assert _messages(advices) == ["Table `t` requires columns: created_ts, updated_ts"]
        assert advices[0].code is Code.COLUMN_REQUIRED
        assert advices[0].line == 1

    def test_compliant_table(self, review, rule):
        advices, _ = review("CREATE TABLE t (id INT, created_ts TIMESTAMP, updated_ts TIMESTAMP);", rule)
        assert advices == []

    def test_report_line_is_statement_line(self, review, rule):
        advices, _ = review("SELECT 1;\n\nCREATE TABLE t (\n  id INT\n);", rule)
        assert [a.line for a in advices] == [3]

    def test_tables_reported_in_name_order(self, review, rule):
        advices, _ = review("CREATE TABLE zeta (id INT);\nCREATE TABLE alpha (id INT);", rule)
        assert _messages(advices) == [
            "Table `alpha` requires columns: created_ts, updated_ts",
            "Table `zeta` requires columns: created_ts, updated_ts",
        ]


class TestAlterTable:

    def test_add_column_completes_table(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT);\n"
            "ALTER TABLE t ADD COLUMN created_ts TIMESTAMP;\n"
            "ALTER TABLE t ADD COLUMN updated_ts TIMESTAMP;",
            rule,
        )
        assert advices == []

    def test_drop_on_untracked_table(self, review, rule):
        advices, _ = review("SELECT 1;\nALTER TABLE t DROP COLUMN created_ts;", rule)
        assert _messages(advices) == ["Table `t` requires columns: created_ts"]
        assert advices[0].line == 2

    def test_drop_of_optional_column_is_ignored(self, review, rule):
        advices, _ = review("ALTER TABLE t DROP COLUMN nickname;", rule)
        assert advices == []

    def test_rename_required_column_away(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, created_ts INT, updated_ts INT);\n"
            "ALTER TABLE t RENAME COLUMN created_ts TO created_at;",
            rule,
        )
        assert _messages(advices) == ["Table `t` requires columns: created_ts"]
        assert advices[0].line == 2

    def test_rename_into_required_column(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, created_at INT, updated_ts INT);\n"
            "ALTER TABLE t RENAME COLUMN created_at TO created_ts;",
            rule,
        )
        assert advices == []

    def test_change_column_renames_required_column_away(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, created_ts INT, updated_ts INT);\n"
            "ALTER TABLE t CHANGE COLUMN created_ts created_at INT;",
            rule,
        )
        assert _messages(advices) == ["Table `t` requires columns: created_ts"]
        assert advices[0].line == 2

    def test_change_column_into_required_column(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, created_at INT, updated_ts INT);\n"
            "ALTER TABLE t CHANGE created_at created_ts TIMESTAMP;",
            rule,
        )
        assert advices == []

    def test_modify_column_keeps_column_present(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, created_ts INT, updated_ts INT);\n"
            "ALTER TABLE t MODIFY COLUMN created_ts TIMESTAMP;",
            rule,
        )
        assert advices == []

    def test_add_then_drop_matches_never_added(self, review, make_rule):
        added_and_dropped, _ = review(
            "CREATE TABLE t (id INT, updated_ts INT);\n"
            "ALTER TABLE t ADD COLUMN created_ts INT;\n"
            "ALTER TABLE t DROP COLUMN created_ts;",
            make_rule(ColumnRequiredRule, REQUIRED),
        )
        never_added, _ = review(
            "CREATE TABLE t (id INT, updated_ts INT);",
            make_rule(ColumnRequiredRule, REQUIRED),
        )
        assert _messages(added_and_dropped) == _messages(never_added)


class TestDropTable:

    def test_drop_forgets_table(self, review, rule):
        advices, _ = review("CREATE TABLE t (id INT);\nDROP TABLE t;", rule)
        assert advices == []

    def test_drop_of_several_tables(self, review, rule):
        advices, _ = review("CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\nDROP TABLE a, b;", rule)
        assert advices == []

    def test_recreated_after_drop(self, review, rule):
        advices, _ = review(
            "CREATE TABLE t (id INT);\nDROP TABLE t;\nCREATE TABLE t (id INT, created_ts INT);", rule)
        assert _messages(advices) == ["Table `t` requires columns: updated_ts"]
        assert advices[0].line == 3


class TestState:

    def test_fresh_rule_per_script(self, review, make_rule):
        first, _ = review("CREATE TABLE t (id INT);", make_rule(ColumnRequiredRule, REQUIRED))
        second, _ = review("SELECT 1;", make_rule(ColumnRequiredRule, REQUIRED))
        assert len(first) == 1
        assert second == []
