# fetcher/schemas.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class FetchFailure(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT = "transport"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class UpstreamRequest:
    """
    Description d'un appel sortant.

    - name : nom court du fournisseur (utilisé dans les logs)
    - credential : valeur de la clé API ; None => on n'appelle pas le réseau
    - credential_param / credential_header : où placer la clé dans la requête
      (query param ou header, avec un préfixe éventuel type "Bearer ")
    """

    name: str
    method: str
    url: str
    credential: Optional[str] = field(default=None, repr=False)
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    json: Optional[Dict[str, Any]] = None
    credential_param: Optional[str] = None
    credential_header: Optional[str] = None
    credential_prefix: str = ""

    def build_params(self) -> Dict[str, Any]:
        params = dict(self.params)
        if self.credential_param and self.credential:
            params[self.credential_param] = self.credential
        return params

    def build_headers(self) -> Dict[str, str]:
        headers = dict(self.headers)
        if self.credential_header and self.credential:
            headers[self.credential_header] = f"{self.credential_prefix}{self.credential}"
        return headers


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Résultat étiqueté : toujours une valeur exploitable,
    live=False quand c'est le générateur de secours qui l'a produite.
    """

    value: T
    live: bool
    failure: Optional[FetchFailure] = None
    detail: Optional[str] = None
