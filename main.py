# main.py
import routes
from contextlib import asynccontextmanager
from util.enums import Environment
from fastapi import FastAPI, Request
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.database import close_pool, get_pool
from config.rate_limit import limiter
from fastapi.responses import JSONResponse
from util.logger import init_logger
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    logger.info(
        "app.starting env=%s index=%s", settings.APP_ENV, settings.OPENSEARCH_INDEX
    )
    try:
        await get_pool()
    except Exception:
        logger.critical("app.start.error", exc_info=True)
        raise
    logger.info("app.started neural=%s", bool(settings.OPENSEARCH_MODEL_ID))

    try:
        yield
    finally:
        try:
            await close_pool()
        except Exception:
            logger.error("app.shutdown.db.error", exc_info=True)
        logger.info("app.shutdown")


app: FastAPI = FastAPI(lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-User-Id"],
)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.exception_handler(RateLimitExceeded)
async def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "ok": False,
            "error": "rate_limited",
            "message": f"Too many requests. Try again in {settings.RATE_LIMIT_SECONDS}s.",
        },
        headers={"Retry-After": str(settings.RATE_LIMIT_SECONDS)},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
