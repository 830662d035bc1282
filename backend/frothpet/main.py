"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from frothpet.config import settings
from frothpet.core.exceptions import FrothPetError
from frothpet.core.logging_config import setup_logging
from frothpet.db.database import engine, Base
from frothpet.db.redis import close_redis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Startup: create tables (dev only; use migrations in production)
    import frothpet.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("FROTH PET API started (%s)", settings.APP_ENV)
    yield
    # Shutdown: close connections
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title="FROTH PET API",
    description="Backend API for FROTH PET - pet NFTs, energy, food and leaderboards",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FrothPetError)
async def froth_error_handler(request: Request, exc: FrothPetError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": f"{field}: {first.get('msg', 'invalid input')}",
            "code": "validation_error",
        },
    )


# --- Routes ---
from frothpet.api.routes import nft, pet, shop, leaderboard, wallet, games, chat  # noqa: E402

app.include_router(nft.router, prefix="/api/nft", tags=["nft"])
app.include_router(pet.router, prefix="/api/pet", tags=["pet"])
app.include_router(shop.router, prefix="/api", tags=["shop"])
app.include_router(leaderboard.router, prefix="/api/leaderboard", tags=["leaderboard"])
app.include_router(wallet.router, prefix="/api/wallet", tags=["wallet"])
app.include_router(games.router, prefix="/api/games", tags=["games"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
