# test/test_rules.py
"""Behaviour of the individual rules against small scripts."""
import pytest

from sqlreview.advice import Code, Severity
from sqlreview.errors import ConfigurationError
from sqlreview.rules.column_no_null_rule import ColumnNoNullRule
from sqlreview.rules.column_require_default_rule import ColumnRequireDefaultRule
from sqlreview.rules.column_set_default_for_not_null_rule import ColumnSetDefaultForNotNullRule
from sqlreview.rules.column_type_disallow_list_rule import ColumnTypeDisallowListRule
from sqlreview.rules.function_disallowed_list_rule import FunctionDisallowedListRule
from sqlreview.rules.index_pk_type_allowlist_rule import IndexPKTypeAllowlistRule
from sqlreview.rules.index_type_no_blob_rule import IndexTypeNoBlobRule
from sqlreview.rules.naming_column_rule import NamingColumnRule
from sqlreview.rules.naming_table_rule import NamingTableRule
from sqlreview.rules.statement_disallow_commit_rule import DisallowCommitRule
from sqlreview.rules.statement_insert_must_specify_column_rule import InsertMustSpecifyColumnRule
from sqlreview.rules.statement_select_no_select_all_rule import NoSelectAllRule
from sqlreview.rules.statement_where_no_leading_wildcard_like_rule import NoLeadingWildcardLikeRule
from sqlreview.rules.statement_where_require_rule import WhereRequireRule
from sqlreview.rules.table_drop_naming_convention_rule import TableDropNamingConventionRule
from sqlreview.rules.table_no_foreign_key_rule import TableNoForeignKeyRule
from sqlreview.rules.table_require_pk_rule import TableRequirePKRule


def _codes(advices):
    return [a.code for a in advices]


class TestTableRequirePK:

    def test_missing_primary_key(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id INT);", make_rule(TableRequirePKRule))
        assert [a.message for a in advices] == ["Table `t` requires PRIMARY KEY"]

    def test_inline_and_table_level_keys(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE a (id INT PRIMARY KEY);\nCREATE TABLE b (id INT, PRIMARY KEY (id));",
            make_rule(TableRequirePKRule),
        )
        assert advices == []

    def test_dropping_key_column_of_catalog_table(self, review, make_rule, orders_catalog):
        rule = make_rule(TableRequirePKRule, catalog=orders_catalog)
        advices, _ = review("SELECT 1;\nALTER TABLE orders DROP COLUMN id;", rule, catalog=orders_catalog)
        assert [a.message for a in advices] == ["Table `orders` requires PRIMARY KEY"]
        assert advices[0].line == 2

    def test_unknown_table_assumed_compliant(self, review, make_rule):
        advices, _ = review("ALTER TABLE mystery DROP COLUMN id;", make_rule(TableRequirePKRule))
        assert advices == []

    def test_changed_key_column_stays_key(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY);\n"
            "ALTER TABLE t CHANGE COLUMN id order_id INT;\n"
            "ALTER TABLE t DROP COLUMN order_id;",
            make_rule(TableRequirePKRule),
        )
        assert [a.message for a in advices] == ["Table `t` requires PRIMARY KEY"]
        assert advices[0].line == 3

    def test_drop_table_forgets(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id INT);\nDROP TABLE t;", make_rule(TableRequirePKRule))
        assert advices == []


class TestPrimaryKeyTypeAllowlist:

    def test_inline_key_type(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id VARCHAR(20) PRIMARY KEY);", make_rule(IndexPKTypeAllowlistRule))
        assert len(advices) == 1
        assert advices[0].code is Code.INDEX_PK_TYPE
        assert advices[0].message == (
            'The column `id` in table `t` is one of the primary key, '
            'but its type "varchar(20)" is not in allowlist'
        )

    def test_allowed_table_level_key(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id BIGINT, PRIMARY KEY (id));", make_rule(IndexPKTypeAllowlistRule))
        assert advices == []

    def test_key_added_later_uses_catalog_type(self, review, make_rule, orders_catalog):
        rule = make_rule(IndexPKTypeAllowlistRule, catalog=orders_catalog)
        advices, _ = review("ALTER TABLE orders ADD PRIMARY KEY (code);", rule, catalog=orders_catalog)
        assert len(advices) == 1
        assert '"varchar(10)"' in advices[0].message


class TestIndexTypeNoBlob:

    def test_column_added_earlier_in_script(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY);\n"
            "ALTER TABLE t ADD COLUMN body TEXT;\n"
            "CREATE INDEX idx_t_body ON t (body);",
            make_rule(IndexTypeNoBlobRule),
        )
        assert _codes(advices) == [Code.INDEX_TYPE_NO_BLOB]
        assert advices[0].line == 3
        assert "`t`.`body` is text" in advices[0].message

    def test_overlay_wins_over_catalog(self, review, make_rule, orders_catalog):
        rule = make_rule(IndexTypeNoBlobRule, catalog=orders_catalog)
        advices, _ = review(
            "ALTER TABLE orders DROP COLUMN note;\n"
            "ALTER TABLE orders ADD COLUMN note INT;\n"
            "CREATE INDEX idx_orders_note ON orders (note);",
            rule, catalog=orders_catalog,
        )
        assert advices == []

    def test_catalog_type(self, review, make_rule, orders_catalog):
        rule = make_rule(IndexTypeNoBlobRule, catalog=orders_catalog)
        advices, _ = review("CREATE INDEX idx_orders_note ON orders (note);", rule, catalog=orders_catalog)
        assert len(advices) == 1

    def test_unresolvable_column_skipped(self, review, make_rule):
        advices, _ = review("CREATE INDEX idx_x_y ON x (y);", make_rule(IndexTypeNoBlobRule))
        assert advices == []

    def test_changed_column_resolves_under_new_name(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY, body TEXT);\n"
            "ALTER TABLE t CHANGE COLUMN body body2 TEXT;\n"
            "CREATE INDEX idx_t_body2 ON t (body2);",
            make_rule(IndexTypeNoBlobRule),
        )
        assert _codes(advices) == [Code.INDEX_TYPE_NO_BLOB]
        assert "`t`.`body2` is text" in advices[0].message

    def test_changed_column_takes_new_type(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY, body TEXT);\n"
            "ALTER TABLE t CHANGE COLUMN body body2 INT;\n"
            "CREATE INDEX idx_t_body2 ON t (body2);",
            make_rule(IndexTypeNoBlobRule),
        )
        assert advices == []

    def test_renamed_column_keeps_type(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY, body TEXT);\n"
            "ALTER TABLE t RENAME COLUMN body TO content;\n"
            "CREATE INDEX idx_t_content ON t (content);",
            make_rule(IndexTypeNoBlobRule),
        )
        assert len(advices) == 1
        assert "`t`.`content` is text" in advices[0].message

    def test_modified_column_type(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY, c INT);\n"
            "ALTER TABLE t MODIFY COLUMN c TEXT;\n"
            "CREATE INDEX idx_t_c ON t (c);",
            make_rule(IndexTypeNoBlobRule),
        )
        assert _codes(advices) == [Code.INDEX_TYPE_NO_BLOB]
        assert advices[0].line == 3

    def test_dropped_column_falls_back_to_catalog(self, review, make_rule, orders_catalog):
        rule = make_rule(IndexTypeNoBlobRule, catalog=orders_catalog)
        advices, _ = review(
            "ALTER TABLE orders MODIFY COLUMN note INT;\n"
            "ALTER TABLE orders DROP COLUMN note;\n"
            "CREATE INDEX idx_orders_note ON orders (note);",
            rule, catalog=orders_catalog,
        )
        assert len(advices) == 1
        assert "`orders`.`note` is text" in advices[0].message

    def test_index_inside_create_table(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id INT, body BLOB, INDEX idx_t_body (body));",
                            make_rule(IndexTypeNoBlobRule))
        assert len(advices) == 1


class TestNamingTableAndColumn:

    def test_table_name(self, review, make_rule):
        advices, _ = review("CREATE TABLE OrderItem (id INT);\nCREATE TABLE order_item (id INT);",
                            make_rule(NamingTableRule))
        assert len(advices) == 1
        assert advices[0].message.startswith("`OrderItem` mismatches table naming convention")

    def test_table_name_length(self, review, make_rule):
        rule = make_rule(NamingTableRule, {"format": "^[a-z_]+$", "maxLength": 5})
        advices, _ = review("CREATE TABLE order_item (id INT);", rule)
        assert advices[0].message == (
            "`order_item` mismatches table naming convention, its length should be within 5 characters")

    def test_column_names(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id INT, userName INT);", make_rule(NamingColumnRule))
        assert len(advices) == 1
        assert advices[0].message.startswith("`t`.`userName` mismatches column naming convention")

    def test_added_column_is_checked(self, review, make_rule):
        advices, _ = review("ALTER TABLE t ADD COLUMN BadName INT;", make_rule(NamingColumnRule))
        assert len(advices) == 1
        assert "`t`.`BadName`" in advices[0].message

    def test_changed_column_is_checked_once(self, review, make_rule):
        advices, _ = review("ALTER TABLE t CHANGE COLUMN id BadName INT;", make_rule(NamingColumnRule))
        assert len(advices) == 1
        assert "`t`.`BadName`" in advices[0].message


class TestColumnDefinitionRules:

    def test_type_disallow_list(self, review, make_rule):
        rule = make_rule(ColumnTypeDisallowListRule, {"list": ["JSON"]})
        advices, _ = review("CREATE TABLE t (id INT, doc JSON);", rule)
        assert [a.message for a in advices] == ["Disallow column type JSON but column `t`.`doc` is"]

    def test_type_disallow_list_on_modify(self, review, make_rule):
        rule = make_rule(ColumnTypeDisallowListRule, {"list": ["JSON"]})
        advices, _ = review("ALTER TABLE t MODIFY COLUMN doc JSON;", rule)
        assert [a.message for a in advices] == ["Disallow column type JSON but column `t`.`doc` is"]

    def test_no_null(self, review, make_rule):
        advices, _ = review("CREATE TABLE t (id INT PRIMARY KEY, a INT NOT NULL, b INT);",
                            make_rule(ColumnNoNullRule))
        assert [a.message for a in advices] == ["`t`.`b` cannot have NULL value"]

    def test_require_default(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT AUTO_INCREMENT PRIMARY KEY, name VARCHAR(10), body TEXT, n INT DEFAULT 1);",
            make_rule(ColumnRequireDefaultRule),
        )
        assert [a.message for a in advices] == ["Column `t`.`name` doesn't have DEFAULT."]

    def test_set_default_for_not_null(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT PRIMARY KEY, age INT NOT NULL, score INT NOT NULL DEFAULT 0);",
            make_rule(ColumnSetDefaultForNotNullRule),
        )
        assert [a.message for a in advices] == ["Column `t`.`age` is NOT NULL but doesn't have DEFAULT"]


class TestStatementRules:

    def test_disallowed_function(self, review, make_rule):
        rule = make_rule(FunctionDisallowedListRule, {"list": ["some_udf"]})
        advices, _ = review("SELECT some_udf(a) FROM t;\nSELECT UPPER(a) FROM t;", rule)
        assert [a.message for a in advices] == ["Disallowed function: SOME_UDF"]
        assert advices[0].line == 1

    def test_select_all(self, review, make_rule):
        advices, _ = review("SELECT * FROM t;\nSELECT id FROM t;", make_rule(NoSelectAllRule))
        assert [a.message for a in advices] == ['"SELECT * FROM t" uses SELECT all']

    def test_qualified_star(self, review, make_rule):
        advices, _ = review("SELECT t.* FROM t;", make_rule(NoSelectAllRule))
        assert _codes(advices) == [Code.STATEMENT_SELECT_ALL]

    def test_where_required(self, review, make_rule):
        advices, _ = review(
            "UPDATE t SET a = 1;\nDELETE FROM t WHERE id = 1;\nDELETE FROM t;",
            make_rule(WhereRequireRule),
        )
        assert [a.line for a in advices] == [1, 3]
        assert all(a.code is Code.STATEMENT_NO_WHERE for a in advices)

    def test_subquery_where_does_not_count(self, review, make_rule):
        advices, _ = review("UPDATE t SET a = (SELECT MAX(b) FROM s WHERE s.id = 1);",
                            make_rule(WhereRequireRule))
        assert len(advices) == 1

    def test_leading_wildcard_like(self, review, make_rule):
        advices, _ = review(
            "SELECT id FROM t WHERE name LIKE '%abc';\nSELECT id FROM t WHERE name LIKE 'abc%';",
            make_rule(NoLeadingWildcardLikeRule),
        )
        assert len(advices) == 1
        assert advices[0].message.endswith("uses leading wildcard LIKE")

    def test_insert_must_specify_columns(self, review, make_rule):
        advices, _ = review(
            "INSERT INTO t VALUES (1, 'a');\nINSERT INTO t (id, name) VALUES (1, 'a');",
            make_rule(InsertMustSpecifyColumnRule),
        )
        assert _codes(advices) == [Code.INSERT_NOT_SPECIFY_COLUMN]

    def test_commit(self, review, make_rule):
        advices, _ = review("SELECT 1;\nCOMMIT;", make_rule(DisallowCommitRule))
        assert [a.line for a in advices] == [2]


class TestTableRules:

    def test_foreign_key(self, review, make_rule):
        advices, _ = review(
            "CREATE TABLE t (id INT, pid INT, FOREIGN KEY (pid) REFERENCES p (id));\n"
            "CREATE TABLE u (id INT);",
            make_rule(TableNoForeignKeyRule),
        )
        assert [a.message for a in advices] == ["Foreign key is not allowed in the table `t`"]

    def test_drop_naming(self, review, make_rule):
        advices, _ = review("DROP TABLE orders;\nDROP TABLE orders_del;", make_rule(TableDropNamingConventionRule))
        assert [a.message for a in advices] == [
            '`orders` mismatches drop table naming convention, naming format should be "_del$"']


class TestRuleConfiguration:

    def test_level_sets_severity(self, make_rule):
        rule = make_rule(DisallowCommitRule, level="warning")
        assert rule.severity is Severity.WARNING
        assert rule.title == DisallowCommitRule.rule_name

    def test_unknown_level(self, make_rule):
        with pytest.raises(ConfigurationError):
            make_rule(DisallowCommitRule, level="loud")

    def test_malformed_payload(self, make_rule):
        with pytest.raises(ConfigurationError):
            make_rule(FunctionDisallowedListRule, {"list": "SLEEP"})
        with pytest.raises(ConfigurationError):
            make_rule(NamingTableRule, {"format": "^[a-z]+$", "maxLength": "64"})
