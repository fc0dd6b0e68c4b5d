# news/service.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import httpx

from common.clock import iso, utc_now
from common.config import Settings, get_settings
from common.providers import alphavantage_request, check_alphavantage_body
from fetcher.service import fetch_with_fallback
from news.schemas import AlphaVantageNewsResponse, NewsItem, Sentiment

# ------------------------------------------------------------------
# CONFIG
# ------------------------------------------------------------------
FEED_LIMIT = 10          # demandé à AlphaVantage
MAX_ARTICLES = 5         # renvoyé au dashboard
SUMMARY_MAX_CHARS = 200
SENTIMENT_THRESHOLD = 0.1

# Fallback : 4 articles fixes, horodatés maintenant, -1h, -2h, -3h
SIMULATED_ARTICLES = [
    {
        "title": "Fed Signals Potential Rate Cut in Q2",
        "summary": (
            "Federal Reserve officials hint at monetary policy shift amid economic "
            "uncertainty and inflation concerns."
        ),
        "sentiment": "positive",
        "source": "Financial Times",
    },
    {
        "title": "Tech Earnings Beat Expectations",
        "summary": (
            "Major technology companies report strong quarterly results, driving "
            "market optimism in the sector."
        ),
        "sentiment": "positive",
        "source": "Reuters",
    },
    {
        "title": "Geopolitical Tensions Impact Markets",
        "summary": (
            "Global market uncertainty increases due to ongoing international "
            "conflicts and trade disputes."
        ),
        "sentiment": "negative",
        "source": "Bloomberg",
    },
    {
        "title": "AI Revolution Accelerates",
        "summary": (
            "Artificial intelligence adoption continues across industries, creating "
            "new investment opportunities."
        ),
        "sentiment": "positive",
        "source": "Wall Street Journal",
    },
]


def sentiment_from_score(score: Optional[float]) -> Sentiment:
    """
    > 0.1 → positive, < -0.1 → negative, sinon neutral (score absent = neutral).
    """
    if score is None:
        return "neutral"
    if score > SENTIMENT_THRESHOLD:
        return "positive"
    if score < -SENTIMENT_THRESHOLD:
        return "negative"
    return "neutral"


def _truncate_summary(summary: str) -> str:
    return summary[:SUMMARY_MAX_CHARS] + "..."


def _parse_published(value: str) -> datetime:
    # AlphaVantage : "YYYYMMDDTHHMMSS" (parfois sans les secondes), en UTC
    for fmt in ("%Y%m%dT%H%M%S", "%Y%m%dT%H%M"):
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"time_published illisible: {value!r}")


def simulated_news(now: Optional[datetime] = None) -> List[NewsItem]:
    now = now or utc_now()
    return [
        NewsItem(
            title=art["title"],
            summary=art["summary"],
            sentiment=art["sentiment"],
            timestamp=iso(now - timedelta(hours=i)),
            source=art["source"],
            url="#",
        )
        for i, art in enumerate(SIMULATED_ARTICLES)
    ]


def parse_news_feed(body: Any) -> List[NewsItem]:
    data = check_alphavantage_body(body)
    feed = AlphaVantageNewsResponse.model_validate(data).feed

    items: List[NewsItem] = []
    for art in feed[:MAX_ARTICLES]:
        items.append(
            NewsItem(
                title=art.title,
                summary=_truncate_summary(art.summary),
                sentiment=sentiment_from_score(art.overall_sentiment_score),
                timestamp=iso(_parse_published(art.time_published)),
                source=art.source,
                url=art.url,
            )
        )
    return items


async def fetch_news(
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> List[NewsItem]:
    """
    Flux NEWS_SENTIMENT d'AlphaVantage (5 articles max),
    ou les 4 articles simulés si la clé manque / l'appel échoue / le flux est vide.
    """
    settings = settings or get_settings()
    request = alphavantage_request(settings, "NEWS_SENTIMENT", limit=FEED_LIMIT)

    result = await fetch_with_fallback(request, parse_news_feed, simulated_news, client=client)
    return result.value
