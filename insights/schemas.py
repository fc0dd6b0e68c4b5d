# insights/schemas.py

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

InsightSource = Literal["groq-llama3", "fallback-analysis"]


class StockContext(BaseModel):
    """
    Contexte marché envoyé par le dashboard avec la question.
    """

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    price: float = 0.0
    change: float = 0.0
    change_percent: float = Field(default=0.0, alias="changePercent")


class InsightRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    stock_data: Optional[StockContext] = Field(default=None, alias="stockData")


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    insight: str
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: str
    type: Literal["analysis"] = "analysis"
    source: InsightSource
