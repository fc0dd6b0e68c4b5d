###############################
# IMPORTS
###############################
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.config import get_settings
from common.middleware import RequestLoggingMiddleware
from dashboard.feed import DashboardFeed
from dashboard.router import router as dashboard_router
from dashboard.service import build_scheduler
from insights.router import router as insights_router
from news.router import router as news_router
from pathway.router import router as pathway_router
from stocks.router import router as stocks_router


###############################
# CONFIG GLOBALE
###############################
settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("dashboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Démarre les intervalles du dashboard (ticks, insights, news, statut)
    et les annule tous à l'arrêt du serveur.
    """
    scheduler = None
    if get_settings().dashboard_feed_enabled:
        scheduler = build_scheduler(app.state.dashboard_feed)
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()


app = FastAPI(
    title="Market Pulse Dashboard API",
    description="Backend du dashboard : cotations, news, insights IA (avec données simulées en secours)",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.dashboard_feed = DashboardFeed()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,  # "*" par défaut pour le dev
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Toutes les routes sont déjà préfixées /api dans leurs routers
app.include_router(stocks_router)
app.include_router(news_router)
app.include_router(insights_router)
app.include_router(pathway_router)
app.include_router(dashboard_router)


###############################
# ENDPOINTS
###############################
@app.get("/")
async def root():
    return {"message": "API Market Pulse Dashboard OK"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host="0.0.0.0", port=8000, reload=True)
