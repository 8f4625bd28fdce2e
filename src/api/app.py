"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

import src.domain  # noqa: F401  registers tables on SQLModel.metadata
from src.api.error import register_error_handlers
from src.api.routes.invoices import router as invoices_router
from src.api.routes.verification import router as verification_router
from src.api.routes.retention import router as retention_router
from src.api.routes.documents import router as documents_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    from src.depends import engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema ready")
    yield


def create_app(config) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Document Issuance & Verification Service",
        description="Issues tamper-evident invoices, receipts and credit notes and verifies them publicly",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(invoices_router, prefix=config.API_PREFIX)
    app.include_router(documents_router, prefix=config.API_PREFIX)
    app.include_router(verification_router, prefix=config.API_PREFIX)
    app.include_router(retention_router, prefix=config.API_PREFIX)

    return app
