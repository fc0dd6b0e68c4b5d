# news/router.py

from fastapi import APIRouter, Depends
from typing import List
import httpx

from common.http import get_http_client
from news.schemas import NewsItem
from news.service import fetch_news

router = APIRouter(prefix="/api/news", tags=["news"])


@router.get("", response_model=List[NewsItem])
async def get_news(client: httpx.AsyncClient = Depends(get_http_client)):
    """
    News marché avec sentiment.
    ⚠️ En cas d'erreur AlphaVantage on renvoie les news simulées
    plutôt qu'une erreur HTTP 500, pour éviter un bloc vide sur le front.
    """
    return await fetch_news(client=client)
