"""
QuoteDesk — supplier quotation & RFQ workflow API.

Start:
    uvicorn quotedesk.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    - Swagger UI: http://localhost:8000/docs
"""

import asyncio
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from .config import APP_VERSION, settings
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import auth, buyer, quotations, rfqs

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    if not os.environ.get("TESTING"):
        from .scheduler import start_scheduler

        task = asyncio.create_task(start_scheduler())
    logger.info("QuoteDesk started", version=APP_VERSION)
    yield
    if task:
        task.cancel()


app = FastAPI(title="QuoteDesk", version=APP_VERSION, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    same_site="lax",
    https_only=settings.app_url.startswith("https"),
)

app.include_router(auth.router)
app.include_router(quotations.router)
app.include_router(rfqs.router)
app.include_router(buyer.router)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "version": APP_VERSION}
