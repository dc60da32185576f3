"""
Point d'entrée principal de l'API du back-office d'assistance.
Démarrage : uvicorn backoffice.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import backoffice.models  # noqa: F401 : enregistre tous les modèles dans Base.metadata avant les routers
from backoffice.config import settings
from backoffice.database import Base, engine
from backoffice.grid.store import AttendanceStoreError
from backoffice.routers import assistance, assistants

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : crée les tables manquantes si AUTO_CREATE_TABLES est activé."""
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables créées (AUTO_CREATE_TABLES).")
    yield


app = FastAPI(
    title="Backoffice Asistencias API",
    description="API de suivi mensuel des assistances du personnel",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : autorise les ports localhost en développement (CORS_ORIGIN_REGEX en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-User-Email", "X-User-Role"],
)


app.include_router(assistance.router)
app.include_router(assistants.router)


@app.exception_handler(AttendanceStoreError)
async def store_error_handler(request: Request, exc: AttendanceStoreError) -> JSONResponse:
    """Magasin indisponible pendant une lecture ou une écriture synchrone."""
    logger.error("Erreur du magasin d'assistance : %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Le magasin de données est momentanément indisponible."},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour que la réponse 500
    passe par CORSMiddleware (headers CORS présents côté navigateur).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Backoffice Asistencias API", "version": "0.1.0"}
