"""
Shared test fixtures and helpers.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import httpx
import pytest

from api import app
from common.http import get_http_client
from dashboard.feed import DashboardFeed

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Fake upstream (MockTransport qui enregistre les appels)
# ---------------------------------------------------------------------------


class FakeUpstream:
    """Remplace les fournisseurs externes ; compte les appels sortants."""

    def __init__(self, handler: Optional[Handler] = None):
        self.calls: List[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(503))

    def respond_with(self, handler: Handler) -> None:
        self._handler = handler

    def respond_json(self, payload, status_code: int = 200) -> None:
        self._handler = lambda request: httpx.Response(status_code, json=payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self._handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def completion_body(content: Optional[str] = "Hold AAPL, momentum is intact.") -> dict:
    """Corps chat.completion minimal valide (format OpenAI / Groq)."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1_700_000_000,
        "model": "llama3-8b-8192",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


def global_quote_body(
    symbol: str = "AAPL",
    price: str = "189.8400",
    change: str = "2.1500",
    change_percent: str = "1.1455%",
    volume: str = "52164500",
) -> dict:
    return {
        "Global Quote": {
            "01. symbol": symbol,
            "02. open": "187.1500",
            "05. price": price,
            "06. volume": volume,
            "07. latest trading day": "2024-01-02",
            "08. previous close": "187.6900",
            "09. change": change,
            "10. change percent": change_percent,
        }
    }


def news_article(i: int = 0, score: float = 0.25, summary: str = "Short summary.") -> dict:
    return {
        "title": f"Headline {i}",
        "url": f"https://example.com/news/{i}",
        "time_published": "20240102T153000",
        "summary": summary,
        "source": "Benzinga",
        "overall_sentiment_score": score,
        "overall_sentiment_label": "Somewhat-Bullish",
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Aucune clé API par défaut : chaque test active ce dont il a besoin."""
    for name in (
        "GROQCLOUD_API_KEY",
        "ALPHAVANTAGE_API_KEY",
        "GROQ_BASE_URL",
        "GROQ_MODEL",
        "ALPHAVANTAGE_BASE_URL",
        "HTTP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DASHBOARD_FEED_ENABLED", "false")


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def client(upstream: FakeUpstream):
    async def _override_http_client():
        async with upstream.client() as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = _override_http_client
    app.state.dashboard_feed = DashboardFeed()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
