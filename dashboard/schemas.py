# dashboard/schemas.py

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from news.schemas import Sentiment

FeedInsightType = Literal["analysis", "alert", "recommendation"]


class StockTick(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    price: float
    change: float
    change_percent: float = Field(alias="changePercent")
    volume: int = Field(ge=0)
    timestamp: str


class FeedInsight(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: FeedInsightType
    content: str
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: str
    related_symbols: Tuple[str, ...] = Field(default=(), alias="relatedSymbols")


class FeedNews(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str
    sentiment: Sentiment
    timestamp: str
    source: str


class ApiStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    groq: bool = False
    alphavantage: bool = False


class DashboardSnapshot(BaseModel):
    """
    Etat complet du dashboard à un instant t.
    Jamais modifié : chaque mise à jour produit un nouveau snapshot (version + 1).
    insights / news : du plus récent au plus ancien.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: int = 0
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    stocks: Tuple[StockTick, ...] = ()
    insights: Tuple[FeedInsight, ...] = ()
    news: Tuple[FeedNews, ...] = ()
    api_status: ApiStatus = Field(default_factory=ApiStatus, alias="apiStatus")

    def find_stock(self, symbol: str) -> Optional[StockTick]:
        for tick in self.stocks:
            if tick.symbol == symbol:
                return tick
        return None


class DashboardQuery(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    query: str = Field(min_length=1)
    symbol: str = "AAPL"
