# insights/router.py

from fastapi import APIRouter, Depends
import httpx

from common.http import get_http_client
from insights.schemas import Insight, InsightRequest
from insights.service import generate_insight

router = APIRouter(prefix="/api/ai-insights", tags=["ai-insights"])


@router.post("", response_model=Insight)
async def post_ai_insight(
    req: InsightRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Analyse courte via Groq (API compatible OpenAI).
    Si Groq casse ou n'est pas configuré → analyse "canned" choisie par mots-clés.
    """
    return await generate_insight(req.query, req.stock_data, client=client)
