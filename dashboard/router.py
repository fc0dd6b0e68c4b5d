# dashboard/router.py

import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
import httpx

from common.http import get_http_client
from dashboard.feed import DashboardFeed
from dashboard.schemas import DashboardQuery, DashboardSnapshot, FeedInsight
from dashboard.service import answer_query

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

KEEPALIVE_SECONDS = 15.0


def get_feed(request: Request) -> DashboardFeed:
    return request.app.state.dashboard_feed


@router.get("/snapshot", response_model=DashboardSnapshot)
async def get_snapshot(feed: DashboardFeed = Depends(get_feed)):
    return feed.snapshot


@router.get("/stream")
async def stream_snapshots(request: Request, feed: DashboardFeed = Depends(get_feed)):
    """
    Server-Sent Events : un évènement par nouveau snapshot
    (le premier est l'état courant), commentaire keep-alive sinon.
    """

    async def events():
        with feed.subscribe() as queue:
            while not await request.is_disconnected():
                try:
                    snapshot = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield f"data: {snapshot.model_dump_json(by_alias=True)}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/query", response_model=FeedInsight)
async def post_query(
    req: DashboardQuery,
    feed: DashboardFeed = Depends(get_feed),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await answer_query(feed, req.query, req.symbol, client=client)
