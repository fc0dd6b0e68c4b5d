# stocks/schemas.py

from __future__ import annotations

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QuoteSource = Literal["live", "simulated"]


class QuoteSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    price: float
    change: float
    change_percent: float = Field(alias="changePercent")
    volume: int = Field(ge=0)
    timestamp: str
    source: QuoteSource


# ---------------------------------------------------------------------------
# Format brut AlphaVantage (GLOBAL_QUOTE)
# ---------------------------------------------------------------------------

class AlphaVantageGlobalQuote(BaseModel):
    symbol: str = Field(alias="01. symbol", min_length=1)
    price: float = Field(alias="05. price")
    volume: int = Field(alias="06. volume", ge=0)
    change: float = Field(alias="09. change")
    change_percent: float = Field(alias="10. change percent")

    @field_validator("change_percent", mode="before")
    @classmethod
    def _strip_percent(cls, value):
        # "1.2345%" → 1.2345
        if isinstance(value, str):
            return value.strip().rstrip("%")
        return value

    @model_validator(mode="after")
    def _check_sign(self) -> "AlphaVantageGlobalQuote":
        # Strict : un côté à zéro et l'autre non est aussi incohérent
        if np.sign(self.change) != np.sign(self.change_percent):
            raise ValueError("signe incohérent entre change et change percent")
        return self


class AlphaVantageQuoteResponse(BaseModel):
    global_quote: AlphaVantageGlobalQuote = Field(alias="Global Quote")
