# fetcher/service.py

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx
from pydantic import ValidationError

from common.config import get_settings
from fetcher.schemas import FetchFailure, FetchResult, UpstreamRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fallback(
    request: UpstreamRequest,
    build_fallback: Callable[[], T],
    failure: FetchFailure,
    detail: str,
) -> FetchResult[T]:
    # Jamais la clé ni l'URL complète (la clé AlphaVantage passe en query param)
    logger.warning("%s indisponible (%s): %s -> données simulées", request.name, failure.value, detail)
    return FetchResult(value=build_fallback(), live=False, failure=failure, detail=detail)


def _describe(exc: Exception) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


async def _send(client: httpx.AsyncClient, request: UpstreamRequest) -> httpx.Response:
    return await client.request(
        request.method,
        request.url,
        params=request.build_params(),
        headers=request.build_headers(),
        json=request.json,
    )


async def fetch_with_fallback(
    request: UpstreamRequest,
    parse: Callable[[Any], T],
    build_fallback: Callable[[], T],
    client: Optional[httpx.AsyncClient] = None,
) -> FetchResult[T]:
    """
    Appel sortant "qui ne casse jamais le front" :

    - pas de clé            → pas d'appel réseau, données de secours
    - erreur réseau / non-2xx → log + données de secours
    - JSON invalide ou rejeté par `parse` → log + données de secours

    `parse` reçoit le JSON décodé et renvoie la valeur finale (même forme que le fallback),
    ou lève ValueError / ValidationError si le payload n'a pas la forme attendue.
    """
    if not request.credential:
        return _fallback(request, build_fallback, FetchFailure.MISSING_CREDENTIAL, "clé API non configurée")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=get_settings().http_timeout_seconds) as own_client:
                resp = await _send(own_client, request)
        else:
            resp = await _send(client, request)
    except httpx.HTTPError as exc:
        return _fallback(request, build_fallback, FetchFailure.TRANSPORT, type(exc).__name__)

    if not resp.is_success:
        return _fallback(request, build_fallback, FetchFailure.TRANSPORT, f"HTTP {resp.status_code}")

    try:
        value = parse(resp.json())
    except (ValueError, ValidationError, KeyError, IndexError, TypeError) as exc:
        # json.JSONDecodeError est une ValueError
        return _fallback(request, build_fallback, FetchFailure.MALFORMED, _describe(exc))

    return FetchResult(value=value, live=True)
