"""
Tests for the FastAPI error handlers and structlog configuration.
"""
import json
import logging

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pager import channel as channel_module
from pager.bootstrap import build_default_chain
from pager.channel import SQLiteChannel
from pager.errors import ExecutionError
from pager.middleware import register_error_handlers
from pager.middleware.structlog_config import compact_sql, configure
from pager.models import PageRequest, PaginatedResponse, PaginationMeta
from pager.session import QuerySession


@pytest.fixture
def client(conn, registry):
    """FastAPI app exposing paged users over the seeded database."""
    app = FastAPI()
    register_error_handlers(app)
    session = QuerySession(SQLiteChannel(conn), registry, chain=build_default_chain())

    @app.get("/users", response_model=PaginatedResponse[dict])
    def list_users(page_size: int = 10, page_index: int = 0, full: bool = False):
        page = PageRequest(page_size=page_size, page_index=page_index, full=full)
        users = session.execute("users.ordered", page, row_mapper=dict)
        return {
            "data": users,
            "pagination": PaginationMeta.create(page.page_index, page.page_size, page.total_count),
        }

    @app.get("/broken")
    def broken():
        return session.execute("users.missing_table", PageRequest(page_size=5))

    @app.get("/ambiguous")
    def ambiguous():
        return session.execute("users.pageable", PageRequest(page_size=1), PageRequest(page_size=2))

    @app.get("/bounded")
    def bounded():
        return session.execute("users.first_five", PageRequest(page_size=5))

    with TestClient(app) as test_client:
        yield test_client


class TestPagedEndpoint:

    def test_first_page(self, client):
        response = client.get("/users", params={"page_size": 10})
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 10
        assert body["pagination"] == {"page": 0, "per_page": 10, "total": 20, "total_pages": 2}

    def test_full(self, client):
        response = client.get("/users", params={"page_size": 10, "full": True})
        assert len(response.json()["data"]) == 20


class TestErrorHandlers:

    def test_count_failure_is_503_without_sql(self, client):
        response = client.get("/broken")
        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "COUNT_FAILED"
        assert "t_missing" not in error["message"]

    def test_ambiguous_pager(self, client):
        response = client.get("/ambiguous")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "AMBIGUOUS_PAGER"

    def test_already_bounded(self, client):
        response = client.get("/bounded")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "ALREADY_BOUNDED"


class TestStructlogConfig:

    @pytest.fixture
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        structlog.reset_defaults()

    def test_configure_installs_json_handler(self, restore_logging):
        configure("DEBUG", json_logs=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_unknown_level_falls_back_to_info(self, restore_logging):
        configure("LOUD", json_logs=False)
        assert logging.getLogger().level == logging.INFO

    def test_compact_sql_folds_whitespace(self):
        processor = compact_sql(max_chars=0)
        event = processor(None, "info", {"event": "statement_failed", "sql": "SELECT *\n  FROM t_user\n"})
        assert event["sql"] == "SELECT * FROM t_user"

    def test_compact_sql_clips_long_statements(self):
        processor = compact_sql(max_chars=10)
        event = processor(None, "info", {"count_sql": "SELECT COUNT(*) FROM t_user", "rows": 3})
        assert event["count_sql"] == "SELECT COU..."
        assert event["rows"] == 3

    def test_failed_statement_logged_on_one_line(self, restore_logging, monkeypatch, capsys, conn):
        configure("INFO", json_logs=True)
        # Fresh proxy so the cached logger does not outlive this test
        monkeypatch.setattr(channel_module, "logger", structlog.get_logger("pager.channel"))
        channel = SQLiteChannel(conn)
        with pytest.raises(ExecutionError):
            channel.fetch_all("SELECT *\n FROM t_missing", ())
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "statement_failed"
        assert record["sql"] == "SELECT * FROM t_missing"
