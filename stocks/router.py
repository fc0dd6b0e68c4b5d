# stocks/router.py

from fastapi import APIRouter, Depends, Query
import httpx

from common.http import get_http_client
from stocks.schemas import QuoteSnapshot
from stocks.service import DEFAULT_SYMBOL, fetch_quote

router = APIRouter(prefix="/api/stocks", tags=["stocks"])


@router.get("", response_model=QuoteSnapshot)
async def get_stock_quote(
    symbol: str = Query(DEFAULT_SYMBOL),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Cotation AlphaVantage si la clé est configurée,
    sinon (ou en cas d'erreur) cotation simulée : jamais d'erreur HTTP.
    """
    return await fetch_quote(symbol, client=client)
