import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rollup.routes import boards, carts, catalog

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Rollup Derived Views API", version="0.1.0")

    level = os.getenv("ROLLUP_LOG_LEVEL")
    if level:
        logging.getLogger("rollup").setLevel(level.upper())

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(carts.router, prefix="/api")
    app.include_router(boards.router, prefix="/api")
    app.include_router(catalog.router, prefix="/api")
    logger.debug("rollup app created with CORS origins %s", origins)

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Rollup Derived Views API",
                "docs": "/docs",
                "health": "/api/carts",
            }
        )

    return app


app = create_app()
