# dashboard/service.py

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import numpy as np

from dashboard.feed import DashboardFeed
from dashboard.generators import generate_feed_insight, generate_feed_news, generate_stock_ticks, new_id
from dashboard.scheduler import IntervalScheduler
from dashboard.schemas import ApiStatus, FeedInsight
from insights.schemas import StockContext
from insights.service import generate_insight
from pathway.router import build_integration_status

# ------------------------------------------------------------------
# CONFIG
# ------------------------------------------------------------------

WATCHED_SYMBOLS = ("AAPL", "GOOGL", "MSFT", "TSLA", "NVDA", "META")

# Périodes en secondes
INTERVALS: Dict[str, float] = {
    "stocks": 3.0,
    "insights": 8.0,
    "news": 12.0,
    "status": 30.0,
}


def api_status_from_integration(status: Dict[str, Any]) -> ApiStatus:
    connectors = status.get("connectors") or {}
    return ApiStatus(
        groq=(connectors.get("groq_ai") or {}).get("status") == "connected",
        alphavantage=(connectors.get("alphavantage") or {}).get("status") == "connected",
    )


def build_scheduler(
    feed: DashboardFeed,
    rng: Optional[np.random.Generator] = None,
    intervals: Optional[Dict[str, float]] = None,
) -> IntervalScheduler:
    """
    Déclare les 4 intervalles du dashboard, chacun publiant dans `feed`.
    """
    rng = rng or np.random.default_rng()
    periods = {**INTERVALS, **(intervals or {})}

    async def tick_stocks() -> None:
        feed.publish_stocks(generate_stock_ticks(WATCHED_SYMBOLS, rng))

    async def tick_insight() -> None:
        feed.publish_insight(generate_feed_insight(WATCHED_SYMBOLS, rng))

    async def tick_news() -> None:
        feed.publish_news(generate_feed_news(rng))

    async def tick_status() -> None:
        feed.publish_status(api_status_from_integration(build_integration_status()))

    scheduler = IntervalScheduler()
    scheduler.add("stocks", periods["stocks"], tick_stocks)
    scheduler.add("insights", periods["insights"], tick_insight)
    scheduler.add("news", periods["news"], tick_news)
    scheduler.add("status", periods["status"], tick_status)
    return scheduler


async def answer_query(
    feed: DashboardFeed,
    query: str,
    symbol: str,
    client: Optional[httpx.AsyncClient] = None,
) -> FeedInsight:
    """
    Question posée depuis le dashboard : on envoie la cotation courante du symbole
    comme contexte, puis on ajoute la réponse en tête de l'historique.
    """
    symbol = symbol.strip().upper() or WATCHED_SYMBOLS[0]
    tick = feed.snapshot.find_stock(symbol)

    context: Optional[StockContext]
    if tick is not None:
        context = StockContext(
            symbol=tick.symbol,
            price=tick.price,
            change=tick.change,
            change_percent=tick.change_percent,
        )
    else:
        # Pas de cotation connue : analyse générale plutôt qu'un faux prix à 0
        context = None

    insight = await generate_insight(query, context, client=client)

    feed_insight = FeedInsight(
        id=new_id(),
        type="analysis",
        content=insight.insight,
        confidence=insight.confidence,
        timestamp=insight.timestamp,
        related_symbols=(symbol,),
    )
    feed.publish_insight(feed_insight)
    return feed_insight
