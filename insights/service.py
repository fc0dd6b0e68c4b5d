# insights/service.py

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import httpx
import numpy as np
from openai.types.chat import ChatCompletion

from common.clock import now_iso
from common.config import Settings, get_settings
from fetcher.schemas import UpstreamRequest
from fetcher.service import fetch_with_fallback
from insights.schemas import Insight, StockContext

FALLBACK_CONFIDENCE = 0.75
LIVE_CONFIDENCE_RANGE = (0.85, 1.0)

SYSTEM_PROMPT = (
    "You are a professional financial analyst. Provide concise investment insights "
    "in 2-3 sentences. Focus on actionable advice."
)

# Analyses de secours : (mots-clés cherchés dans la question, texte si mot-clé, texte par défaut)
# L'ordre compte : la première entrée dont un mot-clé apparaît gagne ;
# sans aucun mot-clé, on renvoie le texte par défaut de la première entrée.
CANNED_ANALYSES: List[Tuple[Tuple[str, ...], str, str]] = [
    (
        ("buy",),
        "Based on current market conditions, consider dollar-cost averaging for "
        "long-term positions. Monitor key support levels and volume indicators.",
        "Based on current market conditions, maintain a diversified portfolio "
        "approach. Monitor key support levels and volume indicators.",
    ),
    (
        ("tech",),
        "Market analysis suggests technology sector shows mixed signals. "
        "Risk management is essential in this environment.",
        "Market analysis suggests current volatility presents both risks and "
        "opportunities. Risk management is essential in this environment.",
    ),
    (
        ("aapl", "apple"),
        "Investment perspective: AAPL shows strong fundamentals but watch for market "
        "rotation. Consider your risk tolerance.",
        "Investment perspective: focus on quality companies with strong balance "
        "sheets. Consider your risk tolerance.",
    ),
    (
        ("sell",),
        "Financial outlook indicates profit-taking may be prudent for overextended "
        "positions. Maintain proper position sizing.",
        "Financial outlook indicates selective buying opportunities in oversold "
        "sectors. Maintain proper position sizing.",
    ),
]


def select_canned_analysis(query: str) -> str:
    text = (query or "").lower()
    for keywords, matched, _default in CANNED_ANALYSES:
        if any(k in text for k in keywords):
            return matched
    return CANNED_ANALYSES[0][2]


def fallback_insight(query: str) -> Insight:
    return Insight(
        insight=select_canned_analysis(query),
        confidence=FALLBACK_CONFIDENCE,
        timestamp=now_iso(),
        source="fallback-analysis",
    )


def build_user_prompt(query: str, stock: Optional[StockContext]) -> str:
    if stock is not None:
        direction = "gains" if stock.change > 0 else "losses"
        context = (
            f"{stock.symbol} is trading at ${stock.price} with {direction} "
            f"of {abs(stock.change_percent)}%"
        )
    else:
        context = "General market analysis requested"

    return (
        f'Financial Query: "{query}"\n\n'
        f"Current Market Context: {context}\n\n"
        "Provide a brief professional analysis."
    )


def extract_completion_text(body: Any) -> str:
    """
    Valide le corps avec le schéma ChatCompletion du SDK OpenAI
    (Groq expose une API compatible) et renvoie choices[0].message.content.
    """
    completion = ChatCompletion.model_validate(body)
    if not completion.choices:
        raise ValueError("réponse sans choices")

    content = completion.choices[0].message.content
    if not content or not content.strip():
        raise ValueError("réponse vide du modèle")
    return content.strip()


def completion_request(settings: Settings, query: str, stock: Optional[StockContext]) -> UpstreamRequest:
    return UpstreamRequest(
        name="groq:chat.completions",
        method="POST",
        url=f"{settings.groq_base_url.rstrip('/')}/chat/completions",
        credential=settings.groq_api_key,
        credential_header="Authorization",
        credential_prefix="Bearer ",
        headers={"Content-Type": "application/json"},
        json={
            "model": settings.groq_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(query, stock)},
            ],
            "temperature": 0.3,
            "max_tokens": 150,
            "top_p": 1,
            "stream": False,
        },
    )


async def generate_insight(
    query: str,
    stock: Optional[StockContext] = None,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
    rng: Optional[np.random.Generator] = None,
) -> Insight:
    settings = settings or get_settings()
    rng = rng or np.random.default_rng()

    def parse(body: Any) -> Insight:
        return Insight(
            insight=extract_completion_text(body),
            confidence=float(rng.uniform(*LIVE_CONFIDENCE_RANGE)),
            timestamp=now_iso(),
            source="groq-llama3",
        )

    result = await fetch_with_fallback(
        completion_request(settings, query, stock),
        parse,
        lambda: fallback_insight(query),
        client=client,
    )
    return result.value
