import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studyassist.config import settings
from studyassist.db import init_all_databases

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    logger.info("Study data directory: %s", settings.data_dir)
    yield


def create_app() -> FastAPI:
    application = FastAPI(
        title="Study Assistant Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from studyassist.routers import (
        cards,
        health,
        materials,
        preferences,
        projects,
        review,
    )

    application.include_router(health.router)
    application.include_router(
        projects.router, prefix="/projects", tags=["projects"]
    )
    application.include_router(
        materials.router, prefix="/materials", tags=["materials"]
    )
    application.include_router(
        cards.router, prefix="/cards", tags=["cards"]
    )
    application.include_router(
        review.router, prefix="/review", tags=["review"]
    )
    application.include_router(
        preferences.router, prefix="/preferences", tags=["preferences"]
    )

    return application


app = create_app()
