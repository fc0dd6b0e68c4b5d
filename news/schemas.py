# news/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

Sentiment = Literal["positive", "negative", "neutral"]


class NewsItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str
    sentiment: Sentiment
    timestamp: str
    source: str
    url: str


# Format brut AlphaVantage (NEWS_SENTIMENT)
class AlphaVantageArticle(BaseModel):
    title: str
    summary: str = ""
    url: str = "#"
    source: str = "AlphaVantage"
    time_published: str                      # "20240102T153000"
    overall_sentiment_score: Optional[float] = None


class AlphaVantageNewsResponse(BaseModel):
    feed: List[AlphaVantageArticle] = Field(min_length=1)
