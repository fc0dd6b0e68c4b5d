# dashboard/feed.py

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Any, Iterator, Sequence, Set

from common.clock import now_iso
from dashboard.schemas import ApiStatus, DashboardSnapshot, FeedInsight, FeedNews, StockTick

MAX_INSIGHTS = 10
MAX_NEWS = 5


class DashboardFeed:
    """
    Canal à sens unique vers le front :
    les jobs publient, les abonnés (SSE) ne font que lire des snapshots immuables.
    """

    def __init__(self, max_insights: int = MAX_INSIGHTS, max_news: int = MAX_NEWS):
        self.max_insights = max_insights
        self.max_news = max_news
        self._snapshot = DashboardSnapshot()
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def publish_stocks(self, ticks: Sequence[StockTick]) -> DashboardSnapshot:
        return self._publish(stocks=tuple(ticks))

    def publish_insight(self, insight: FeedInsight) -> DashboardSnapshot:
        history = (insight,) + self._snapshot.insights
        return self._publish(insights=history[: self.max_insights])

    def publish_news(self, item: FeedNews) -> DashboardSnapshot:
        history = (item,) + self._snapshot.news
        return self._publish(news=history[: self.max_news])

    def publish_status(self, status: ApiStatus) -> DashboardSnapshot:
        return self._publish(api_status=status)

    def _publish(self, **changes: Any) -> DashboardSnapshot:
        snapshot = self._snapshot.model_copy(
            update={
                **changes,
                "version": self._snapshot.version + 1,
                "updated_at": now_iso(),
            }
        )
        self._snapshot = snapshot

        for queue in self._subscribers:
            # Un abonné lent ne garde que le dernier snapshot
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)

        return snapshot

    # ------------------------------------------------------------------
    # Abonnement
    # ------------------------------------------------------------------

    @contextmanager
    def subscribe(self) -> Iterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        queue.put_nowait(self._snapshot)
        self._subscribers.add(queue)
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)
