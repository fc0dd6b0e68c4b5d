"""
Tests for the placeholder pathway status routes.
"""

from __future__ import annotations

import numpy as np
import pytest

from common.config import Settings
from pathway.router import STREAM_SOURCES, build_integration_status, build_stream_status


class TestIntegrationStatus:
    def test_connectors_reflect_keys(self):
        status = build_integration_status(Settings(groq_api_key="g", alphavantage_api_key="a"))
        connectors = status["connectors"]
        assert connectors["alphavantage"]["status"] == "connected"
        assert connectors["news_feed"]["status"] == "connected"
        assert connectors["groq_ai"]["status"] == "connected"

    def test_not_configured_without_keys(self):
        connectors = build_integration_status(Settings())["connectors"]
        assert {c["status"] for c in connectors.values()} == {"not_configured"}

    def test_metric_ranges(self):
        rng = np.random.default_rng(11)
        for _ in range(20):
            status = build_integration_status(Settings(), rng)
            assert 10_000 <= status["vectorStore"]["totalDocuments"] < 60_000
            assert status["pipeline"]["uptime"] == "99.9%"
            assert status["pipeline"]["errorRate"].endswith("%")
            assert status["connectors"]["alphavantage"]["latency"].endswith("ms")


class TestStreamStatus:
    def test_shape(self):
        status = build_stream_status(np.random.default_rng(5))
        assert status["status"] == "active"
        assert status["sources"] == STREAM_SOURCES
        assert 0 <= status["recordsProcessed"] < 10_000


@pytest.mark.anyio
class TestPathwayRoutes:
    async def test_integration_route(self, client):
        resp = await client.get("/api/pathway-integration")
        assert resp.status_code == 200
        assert set(resp.json()) == {"status", "connectors", "vectorStore", "pipeline"}

    async def test_stream_route(self, client):
        resp = await client.get("/api/pathway-stream")
        assert resp.status_code == 200
        assert set(resp.json()) == {"status", "sources", "lastUpdate", "recordsProcessed", "latency"}

    async def test_stream_unexpected_error_is_500(self, client, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr("pathway.router.build_stream_status", _boom)
        resp = await client.get("/api/pathway-stream")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to get stream status"}

    async def test_integration_unexpected_error_is_500(self, client, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr("pathway.router.build_integration_status", _boom)
        resp = await client.get("/api/pathway-integration")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Pathway integration error"}
