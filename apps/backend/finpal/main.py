import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finpal.config import ALLOW_ORIGINS, settings
from finpal.db import init_db
from finpal.logging import configure_json_logging
from finpal.routers import chat as chat_router
from finpal.routers import health as health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_json_logging(settings.LOG_LEVEL)
    if settings.APP_ENV in ("dev", "test"):
        init_db()
    logger.info("FinPal backend starting (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(title="FinPal API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router.router, prefix="/api")
app.include_router(chat_router.router, prefix="/api")
