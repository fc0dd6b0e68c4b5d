# common/http.py

from typing import AsyncIterator

import httpx

from common.config import get_settings


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """
    Dépendance FastAPI : un client httpx par requête, avec la deadline configurée.
    Les tests la remplacent via app.dependency_overrides.
    """
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client
