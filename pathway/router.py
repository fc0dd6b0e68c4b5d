# pathway/router.py

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import numpy as np
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from common.clock import iso, now_iso, utc_now
from common.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pathway"])

STREAM_SOURCES = ["alphavantage", "financial_news", "market_data"]


def _connector_status(configured: bool) -> str:
    return "connected" if configured else "not_configured"


def build_integration_status(
    settings: Optional[Settings] = None,
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, Any]:
    """
    Statut "pipeline temps réel" affiché par le dashboard.
    Métriques fictives : aucun pipeline ne tourne derrière,
    seul le statut des connecteurs reflète la présence des clés API.
    """
    settings = settings or get_settings()
    rng = rng or np.random.default_rng()
    now = utc_now()

    return {
        "status": "active",
        "connectors": {
            "alphavantage": {
                "status": _connector_status(bool(settings.alphavantage_api_key)),
                "lastUpdate": iso(now),
                "recordsProcessed": int(rng.integers(0, 10_000)),
                "latency": f"{int(rng.integers(10, 60))}ms",
            },
            "news_feed": {
                "status": _connector_status(bool(settings.alphavantage_api_key)),
                "lastUpdate": iso(now - timedelta(seconds=30)),
                "recordsProcessed": int(rng.integers(0, 1_000)),
                "latency": f"{int(rng.integers(50, 150))}ms",
            },
            "groq_ai": {
                "status": _connector_status(bool(settings.groq_api_key)),
                "lastUpdate": iso(now - timedelta(seconds=5)),
                "requestsProcessed": int(rng.integers(0, 500)),
                "latency": f"{int(rng.integers(100, 300))}ms",
            },
        },
        "vectorStore": {
            "totalDocuments": int(rng.integers(10_000, 60_000)),
            "lastIndexed": iso(now),
            "indexingRate": f"{int(rng.integers(50, 150))} docs/sec",
        },
        "pipeline": {
            "throughput": f"{int(rng.integers(500, 1_500))} events/sec",
            "errorRate": f"{rng.uniform(0.0, 0.1):.3f}%",
            "uptime": "99.9%",
        },
    }


def build_stream_status(rng: Optional[np.random.Generator] = None) -> Dict[str, Any]:
    rng = rng or np.random.default_rng()
    return {
        "status": "active",
        "sources": list(STREAM_SOURCES),
        "lastUpdate": now_iso(),
        "recordsProcessed": int(rng.integers(0, 10_000)),
        "latency": f"{int(rng.integers(0, 100))}ms",
    }


# =====================================================
# ENDPOINTS
# =====================================================

@router.get("/pathway-integration")
async def get_pathway_integration():
    try:
        return build_integration_status()
    except Exception:
        logger.exception("Erreur statut pathway-integration")
        return JSONResponse({"error": "Pathway integration error"}, status_code=500)


@router.get("/pathway-stream")
async def get_pathway_stream():
    try:
        return build_stream_status()
    except Exception:
        logger.exception("Erreur statut pathway-stream")
        return JSONResponse({"error": "Failed to get stream status"}, status_code=500)
