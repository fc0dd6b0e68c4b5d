# dashboard/generators.py

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

import numpy as np

from common.clock import now_iso
from dashboard.schemas import FeedInsight, FeedNews, StockTick

# Textes de démo pour l'animation du dashboard
DEMO_INSIGHTS = [
    "Strong bullish momentum detected in tech sector with 15% volume increase",
    "Market volatility spike - consider defensive positions",
    "AI sector showing consolidation pattern, potential breakout incoming",
    "Energy stocks underperforming, rotation to growth sectors observed",
    "Options flow indicates institutional accumulation in semiconductor stocks",
]
DEMO_INSIGHT_TYPES = ["analysis", "alert", "recommendation"]

DEMO_NEWS = [
    {
        "title": "Fed Signals Potential Rate Cut",
        "summary": "Federal Reserve hints at monetary policy shift",
        "sentiment": "positive",
    },
    {
        "title": "Tech Earnings Beat Expectations",
        "summary": "Major tech companies report strong quarterly results",
        "sentiment": "positive",
    },
    {
        "title": "Geopolitical Tensions Rise",
        "summary": "Market uncertainty increases due to global events",
        "sentiment": "negative",
    },
    {
        "title": "AI Revolution Continues",
        "summary": "Artificial intelligence adoption accelerates across industries",
        "sentiment": "positive",
    },
]
DEMO_NEWS_SOURCE = "Financial Times"


def new_id() -> str:
    return uuid.uuid4().hex


def generate_stock_ticks(symbols: Sequence[str], rng: Optional[np.random.Generator] = None) -> List[StockTick]:
    rng = rng or np.random.default_rng()
    timestamp = now_iso()
    return [
        StockTick(
            symbol=sym,
            price=float(150.0 + rng.uniform(0.0, 200.0)),
            change=float(rng.uniform(-5.0, 5.0)),
            change_percent=float(rng.uniform(-2.5, 2.5)),
            volume=int(rng.integers(0, 10_000_000)),
            timestamp=timestamp,
        )
        for sym in symbols
    ]


def generate_feed_insight(symbols: Sequence[str], rng: Optional[np.random.Generator] = None) -> FeedInsight:
    rng = rng or np.random.default_rng()
    # 1 à 3 symboles liés, pris en tête de liste
    related = tuple(symbols[: int(rng.integers(1, 4))])
    return FeedInsight(
        id=new_id(),
        type=DEMO_INSIGHT_TYPES[int(rng.integers(len(DEMO_INSIGHT_TYPES)))],
        content=DEMO_INSIGHTS[int(rng.integers(len(DEMO_INSIGHTS)))],
        confidence=float(rng.uniform(0.7, 1.0)),
        timestamp=now_iso(),
        related_symbols=related,
    )


def generate_feed_news(rng: Optional[np.random.Generator] = None) -> FeedNews:
    rng = rng or np.random.default_rng()
    item = DEMO_NEWS[int(rng.integers(len(DEMO_NEWS)))]
    return FeedNews(
        title=item["title"],
        summary=item["summary"],
        sentiment=item["sentiment"],
        timestamp=now_iso(),
        source=DEMO_NEWS_SOURCE,
    )
