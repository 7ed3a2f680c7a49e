import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIASGIMiddleware
from slowapi.util import get_remote_address

from .config import CORS_ORIGINS, DATASET_OUTPUT_PATH, LOG_LEVEL, RATE_LIMIT_DEFAULT, WEBSITE_DIR
from .geodesy.errors import GeodesyError
from .routers import geodesy

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT_DEFAULT])

app = FastAPI(
    title="Middle Class Map API",
    description="OS grid and datum conversions behind the middle class map of the UK.",
    version="1.0.0",
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(GeodesyError)
async def geodesy_error_handler(request: Request, exc: GeodesyError):
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.add_middleware(SlowAPIASGIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(geodesy.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint, reports whether the map dataset has been built."""
    return {
        "status": "ok",
        "version": app.version,
        "dataset": "ok" if os.path.isfile(DATASET_OUTPUT_PATH) else "missing",
    }


@app.get("/")
def root():
    return {
        "message": "Middle Class Map API",
        "docs": "/docs",
    }


# Serve the static map if it exists
if os.path.isdir(WEBSITE_DIR):
    app.mount("/map", StaticFiles(directory=str(WEBSITE_DIR), html=True), name="map")
