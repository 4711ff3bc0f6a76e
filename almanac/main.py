# Recipe Almanac API Main Entry Point
import contextlib
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .db import create_tables
from .settings import settings
from .routers.ready import router as ready_router
from .routers.units import router as units_router
from .routers.profiles import router as profiles_router
from .routers.prefs import router as prefs_router
from .routers.recipes import router as recipes_router
from .routers.almanac import router as almanac_router

# Configure structured logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("almanac")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        create_tables()
    logger.info("Recipe Almanac API started")
    yield


# Rate limiter (per-IP)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)

app = FastAPI(title="Recipe Almanac API", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(units_router, prefix="/api/units", tags=["units"])
app.include_router(profiles_router, prefix="/api", tags=["profiles"])
app.include_router(prefs_router, prefix="/api", tags=["prefs"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(almanac_router, prefix="/api", tags=["almanac"])
