"""
Tests for count statement derivation, as text and against sqlite.
"""
import pytest

from pager.errors import UnsupportedStatementError
from pager.services.count_query import derive_count_statement
from pager.services.sql_scanner import parse_select

from conftest import AgeTotal


def _count(conn, sql, params=()):
    return conn.execute(derive_count_statement(sql), params).fetchone()[0]


class TestDeriveCountText:
    """Test the shape of derived statements."""

    def test_projection_replaced(self):
        assert derive_count_statement("select * from t_user") == "SELECT COUNT(*) from t_user"

    def test_filter_kept_order_stripped(self):
        sql = "SELECT id, name FROM t_user WHERE age = ? ORDER BY id"
        assert derive_count_statement(sql) == "SELECT COUNT(*) FROM t_user WHERE age = ?"

    def test_limit_stripped(self):
        assert derive_count_statement("SELECT * FROM t_user LIMIT 5 OFFSET 5") == "SELECT COUNT(*) FROM t_user"

    def test_joins_kept(self):
        sql = "SELECT u.id FROM t_user u JOIN t_role r ON r.user_id = u.id WHERE r.name = :role"
        assert derive_count_statement(sql) == (
            "SELECT COUNT(*) FROM t_user u JOIN t_role r ON r.user_id = u.id WHERE r.name = :role"
        )

    def test_function_call_wrapped(self):
        sql = "SELECT median(age) FROM t_user ORDER BY 1"
        assert derive_count_statement(sql) == (
            "SELECT COUNT(*) FROM (SELECT median(age) FROM t_user\n) AS pager_count"
        )

    def test_distinct_wrapped(self):
        sql = "SELECT DISTINCT age FROM t_user ORDER BY age"
        assert derive_count_statement(sql) == (
            "SELECT COUNT(*) FROM (SELECT DISTINCT age FROM t_user\n) AS pager_count"
        )

    def test_accepts_parsed_statement(self):
        stmt = parse_select("SELECT * FROM t_user")
        assert derive_count_statement(stmt) == "SELECT COUNT(*) FROM t_user"

    def test_tail_placeholder_rejected(self):
        """Stripping a bound LIMIT would shift positional parameters."""
        with pytest.raises(UnsupportedStatementError, match="Placeholders"):
            derive_count_statement("SELECT * FROM t_user ORDER BY id LIMIT ?")

    def test_union_rejected(self):
        with pytest.raises(UnsupportedStatementError):
            derive_count_statement("SELECT id FROM a UNION SELECT id FROM b")


class TestDeriveCountExecution:
    """Derived statements count exactly the rows of the original."""

    def test_unfiltered_count_equals_dataset_size(self, conn):
        assert _count(conn, "select * from t_user") == 20

    def test_empty_dataset(self, empty_conn):
        assert _count(empty_conn, "SELECT * FROM t_user") == 0

    def test_filtered_count(self, conn):
        assert _count(conn, "SELECT * FROM t_user WHERE id < ? ORDER BY id", [7]) == 7

    def test_named_params(self, conn):
        assert _count(conn, "SELECT * FROM t_user WHERE address = :address", {"address": "Shu"}) == 20

    def test_authored_limit_ignored(self, conn):
        assert _count(conn, "SELECT * FROM t_user LIMIT 5") == 20

    def test_distinct_counts_result_rows(self, conn):
        assert _count(conn, "SELECT DISTINCT age FROM t_user") == 1

    def test_group_by_counts_groups(self, conn):
        sql = "SELECT id % 4 AS bucket, COUNT(*) FROM t_user GROUP BY id % 4"
        assert _count(conn, sql) == 4

    def test_aggregate_without_group_by(self, conn):
        assert _count(conn, "SELECT MAX(id) FROM t_user") == 1

    def test_projection_placeholder_keeps_bindings(self, conn):
        sql = "SELECT ? AS tag, id FROM t_user WHERE id >= ?"
        assert _count(conn, sql, ["x", 15]) == 5

    def test_matches_original_row_count(self, conn):
        sql = "SELECT id, name FROM t_user WHERE name LIKE ? ORDER BY id DESC"
        params = ["Liu Bei [1%"]
        expected = len(conn.execute(sql, params).fetchall())
        assert _count(conn, sql, params) == expected

    def test_user_aggregate_counts_result_rows(self, conn):
        """A registered aggregate collapses the result to one row."""
        conn.create_aggregate("age_total", 1, AgeTotal)
        sql = "SELECT age_total(age) AS total FROM t_user WHERE id < ?"
        expected = len(conn.execute(sql, [10]).fetchall())
        assert expected == 1
        assert _count(conn, sql, [10]) == expected

    def test_column_named_offset(self, conn):
        """A column called offset stays in the filter."""
        conn.execute("ALTER TABLE t_user ADD COLUMN offset INTEGER")
        conn.execute("UPDATE t_user SET offset = id")
        sql = "SELECT * FROM t_user WHERE offset > 5 ORDER BY offset"
        assert derive_count_statement(sql) == "SELECT COUNT(*) FROM t_user WHERE offset > 5"
        assert _count(conn, sql) == len(conn.execute(sql).fetchall()) == 14
