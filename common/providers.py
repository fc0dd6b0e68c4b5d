# common/providers.py

from __future__ import annotations

from typing import Any, Dict

from common.config import Settings
from fetcher.schemas import UpstreamRequest

# Clés renvoyées par AlphaVantage avec un HTTP 200 quand la requête est refusée
# (quota atteint, symbole inconnu, clé invalide...)
ALPHAVANTAGE_DIAGNOSTIC_KEYS = ("Error Message", "Note", "Information")


def alphavantage_request(settings: Settings, function: str, **params: Any) -> UpstreamRequest:
    return UpstreamRequest(
        name=f"alphavantage:{function}",
        method="GET",
        url=settings.alphavantage_base_url,
        credential=settings.alphavantage_api_key,
        credential_param="apikey",
        params={"function": function, **params},
    )


def check_alphavantage_body(body: Any) -> Dict[str, Any]:
    """
    Vérifie que le corps est un objet JSON sans message d'erreur AlphaVantage.
    Lève ValueError sinon (→ fallback côté fetcher).
    """
    if not isinstance(body, dict):
        raise ValueError("réponse AlphaVantage inattendue (objet JSON attendu)")

    for key in ALPHAVANTAGE_DIAGNOSTIC_KEYS:
        if body.get(key):
            raise ValueError(f"AlphaVantage {key}: {body[key]}")

    return body
