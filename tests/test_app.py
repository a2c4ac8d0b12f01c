import logging
from unittest.mock import patch

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from backend.app import main
from backend.app.request_log import format_request_line
from example.generate_json import generate_events, SOURCES, EVENT_TYPES
from example.post_events import post_events
from shared.database import ping


class TestStartup:

    @pytest.mark.asyncio
    async def test_startup_logs_connection(self, test_engine, caplog):
        with patch("backend.app.main.engine", test_engine), \
                patch("backend.app.main.ping", return_value="2024-01-01 00:00:00"):
            with caplog.at_level(logging.INFO, logger="backend.app.main"):
                await main.startup_event()

        assert "Database connected: 2024-01-01 00:00:00" in caplog.text

    @pytest.mark.asyncio
    async def test_startup_survives_unreachable_store(self, test_engine, caplog):
        error = OperationalError("SELECT CURRENT_TIMESTAMP", {}, Exception("connection refused"))
        with patch("backend.app.main.engine", test_engine), \
                patch("backend.app.main.ping", side_effect=error):
            with caplog.at_level(logging.ERROR, logger="backend.app.main"):
                await main.startup_event()

        assert "Database connection error" in caplog.text

    def test_ping_returns_store_time(self, test_engine):
        assert ping(test_engine) is not None


class TestRequestLog:

    def test_each_request_is_logged(self, client):
        with patch("backend.app.request_log.logger") as mock_logger:
            client.get("/health")
            client.get("/api/events")

        assert mock_logger.info.call_count == 2
        first = mock_logger.info.call_args_list[0].args[0]
        assert first.startswith("testclient GET /health 200 ")
        assert " ms - " in first

    def test_server_errors_are_logged_as_warnings(self, client):
        with patch("backend.app.request_log.logger") as mock_logger:
            client.post("/api/events", json={"event_type": "click"})

        mock_logger.info.assert_not_called()
        message = mock_logger.warning.call_args.args[0]
        assert "POST /api/events 500" in message

    def test_format_request_line(self):
        line = format_request_line("GET", "/api/stats/top", 200, 3.21456, "42", "10.0.0.7")

        assert line == "10.0.0.7 GET /api/stats/top 200 3.215 ms - 42"

    def test_app_logs_share_one_handler(self):
        app_logger = logging.getLogger("backend")

        assert app_logger.handlers
        assert logging.getLogger("backend.app.request_log").propagate
        assert not logging.getLogger("backend.app.request_log").handlers


class TestSampleData:

    def test_generate_events_shape(self):
        events = generate_events(50, days=3)

        assert len(events) == 50
        for event in events:
            assert set(event) == {"source", "event_type", "occurred_at", "metadata"}
            assert event["source"] in SOURCES
            assert event["event_type"] in EVENT_TYPES

    def test_generated_events_are_accepted(self, client):
        for event in generate_events(10):
            assert client.post("/api/events", json=event).status_code == 201

        assert client.get("/api/stats/summary").json()["total_events"] == 10

    def test_post_events_counts_saved(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if b'"source"' in request.content:
                return httpx.Response(201, json={})
            return httpx.Response(500, json={"error": "Failed to save event"})

        transport = httpx.MockTransport(handler)
        with httpx.Client(transport=transport, base_url="http://test") as client:
            saved = post_events(client, [
                {"source": "web", "event_type": "click"},
                {"event_type": "click"},
                {"source": "ios", "event_type": "login"},
            ])

        assert saved == 2
