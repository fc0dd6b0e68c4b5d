"""
Tests for the AI insight route (Groq chat completion + canned analyses).
"""

from __future__ import annotations

import json

import numpy as np
import pytest

from common.config import Settings
from insights.schemas import StockContext
from insights.service import (
    CANNED_ANALYSES,
    FALLBACK_CONFIDENCE,
    build_user_prompt,
    extract_completion_text,
    generate_insight,
    select_canned_analysis,
)

from conftest import completion_body

INSIGHT_KEYS = {"insight", "confidence", "timestamp", "type", "source"}


class TestCannedSelection:
    @pytest.mark.parametrize(
        "query,index",
        [
            ("Should I buy AAPL?", 0),
            ("BUY signal on NVDA?", 0),
            ("what about tech stocks", 1),
            ("Apple earnings outlook", 2),
            ("is AAPL overvalued", 2),
            ("time to sell?", 3),
        ],
    )
    def test_keyword_match(self, query, index):
        assert select_canned_analysis(query) == CANNED_ANALYSES[index][1]

    @pytest.mark.parametrize("query", ["general market outlook", "", "  "])
    def test_no_keyword_uses_neutral_default(self, query):
        text = select_canned_analysis(query)
        assert text == CANNED_ANALYSES[0][2]
        assert "diversified portfolio" in text
        assert "dollar-cost" not in text


class TestPrompt:
    def test_with_market_context(self):
        stock = StockContext(symbol="AAPL", price=175.5, change=2.1, change_percent=1.2)
        prompt = build_user_prompt("Should I buy AAPL?", stock)
        assert 'Financial Query: "Should I buy AAPL?"' in prompt
        assert "AAPL is trading at $175.5 with gains of 1.2%" in prompt

    def test_losses_use_absolute_percent(self):
        stock = StockContext(symbol="TSLA", price=200.0, change=-3.0, change_percent=-1.5)
        assert "with losses of 1.5%" in build_user_prompt("?", stock)

    def test_without_context(self):
        assert "General market analysis requested" in build_user_prompt("Outlook?", None)


class TestExtractCompletion:
    def test_valid(self):
        assert extract_completion_text(completion_body("  Stay diversified.  ")) == "Stay diversified."

    @pytest.mark.parametrize(
        "body",
        [
            completion_body(None),
            completion_body("   "),
            dict(completion_body(), choices=[]),
            {"choices": [{"message": {"content": "missing envelope"}}]},
            {"error": {"message": "invalid api key"}},
        ],
    )
    def test_rejects_malformed(self, body):
        with pytest.raises(ValueError):
            extract_completion_text(body)


@pytest.mark.anyio
class TestGenerateInsight:
    async def test_fallback_without_key(self, upstream):
        async with upstream.client() as http_client:
            insight = await generate_insight("Should I buy AAPL?", client=http_client, settings=Settings())

        assert insight.source == "fallback-analysis"
        assert insight.confidence == FALLBACK_CONFIDENCE
        assert insight.insight == CANNED_ANALYSES[0][1]
        assert upstream.calls == []

    async def test_live_completion(self, upstream):
        upstream.respond_json(completion_body("Momentum remains strong."))
        settings = Settings(groq_api_key="groq-key")
        rng = np.random.default_rng(3)
        stock = StockContext(symbol="AAPL", price=175.0, change=1.0, change_percent=0.5)

        async with upstream.client() as http_client:
            insight = await generate_insight("Outlook?", stock, client=http_client, settings=settings, rng=rng)

        assert insight.source == "groq-llama3"
        assert insight.insight == "Momentum remains strong."
        assert 0.85 <= insight.confidence <= 1.0

        sent = upstream.calls[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://api.groq.com/openai/v1/chat/completions"
        assert sent.headers["Authorization"] == "Bearer groq-key"
        body = json.loads(sent.content)
        assert body["model"] == "llama3-8b-8192"
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 150
        assert body["messages"][0]["role"] == "system"
        assert "AAPL is trading at $175.0" in body["messages"][1]["content"]

    async def test_empty_completion_falls_back(self, upstream):
        upstream.respond_json(completion_body(""))
        async with upstream.client() as http_client:
            insight = await generate_insight(
                "sell?", client=http_client, settings=Settings(groq_api_key="groq-key")
            )

        assert insight.source == "fallback-analysis"
        assert insight.insight == CANNED_ANALYSES[3][1]


@pytest.mark.anyio
class TestInsightsRoute:
    async def test_fallback_contract(self, client, upstream):
        resp = await client.post("/api/ai-insights", json={"query": "Should I buy AAPL?"})
        assert resp.status_code == 200
        payload = resp.json()
        assert set(payload) == INSIGHT_KEYS
        assert payload["confidence"] == 0.75
        assert payload["source"] == "fallback-analysis"
        assert payload["type"] == "analysis"
        assert "buy" in payload["insight"].lower() or "aapl" in payload["insight"].lower()
        assert upstream.calls == []

    async def test_accepts_stock_data(self, client, upstream, monkeypatch):
        monkeypatch.setenv("GROQCLOUD_API_KEY", "groq-key")
        upstream.respond_json(completion_body("Consider trimming."))

        resp = await client.post(
            "/api/ai-insights",
            json={
                "query": "What now?",
                "stockData": {"symbol": "MSFT", "price": 380.2, "change": -2.0, "changePercent": -0.52},
            },
        )
        assert resp.status_code == 200
        assert resp.json()["source"] == "groq-llama3"
        body = json.loads(upstream.calls[0].content)
        assert "MSFT is trading at $380.2 with losses of 0.52%" in body["messages"][1]["content"]

    async def test_upstream_401_still_200(self, client, upstream, monkeypatch):
        monkeypatch.setenv("GROQCLOUD_API_KEY", "bad-key")
        upstream.respond_json({"error": {"message": "Invalid API Key"}}, status_code=401)

        resp = await client.post("/api/ai-insights", json={"query": "tech outlook"})
        assert resp.status_code == 200
        assert resp.json()["insight"] == CANNED_ANALYSES[1][1]

    async def test_missing_query_is_422(self, client):
        resp = await client.post("/api/ai-insights", json={})
        assert resp.status_code == 422

    async def test_repeated_calls_keep_shape(self, client):
        for _ in range(3):
            resp = await client.post("/api/ai-insights", json={"query": "anything"})
            assert resp.status_code == 200
            assert set(resp.json()) == INSIGHT_KEYS
