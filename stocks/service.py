# stocks/service.py

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import numpy as np

from common.clock import now_iso
from common.config import Settings, get_settings
from common.providers import alphavantage_request, check_alphavantage_body
from fetcher.service import fetch_with_fallback
from stocks.schemas import AlphaVantageQuoteResponse, QuoteSnapshot

DEFAULT_SYMBOL = "AAPL"

# Prix de base pour la simulation (quelques tickers connus)
BASE_PRICES: Dict[str, float] = {
    "AAPL": 175.0,
    "GOOGL": 140.0,
    "MSFT": 380.0,
}
DEFAULT_BASE_PRICE = 150.0


def normalize_symbol(symbol: Optional[str]) -> str:
    sym = (symbol or "").strip().upper()
    return sym or DEFAULT_SYMBOL


def simulated_quote(symbol: str, rng: Optional[np.random.Generator] = None) -> QuoteSnapshot:
    """
    Cotation de démonstration : prix de base ±10, variation aléatoire.
    """
    rng = rng or np.random.default_rng()
    base = BASE_PRICES.get(symbol, DEFAULT_BASE_PRICE)

    return QuoteSnapshot(
        symbol=symbol,
        price=float(base + rng.uniform(-10.0, 10.0)),
        change=float(rng.uniform(-5.0, 5.0)),
        change_percent=float(rng.uniform(-2.5, 2.5)),
        volume=int(rng.integers(0, 10_000_000)),
        timestamp=now_iso(),
        source="simulated",
    )


def parse_global_quote(body: Any) -> QuoteSnapshot:
    data = check_alphavantage_body(body)
    quote = AlphaVantageQuoteResponse.model_validate(data).global_quote

    return QuoteSnapshot(
        symbol=quote.symbol,
        price=quote.price,
        change=quote.change,
        change_percent=quote.change_percent,
        volume=quote.volume,
        timestamp=now_iso(),
        source="live",
    )


async def fetch_quote(
    symbol: str,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
    rng: Optional[np.random.Generator] = None,
) -> QuoteSnapshot:
    settings = settings or get_settings()
    symbol = normalize_symbol(symbol)

    request = alphavantage_request(settings, "GLOBAL_QUOTE", symbol=symbol)
    result = await fetch_with_fallback(
        request,
        parse_global_quote,
        lambda: simulated_quote(symbol, rng),
        client=client,
    )
    return result.value
