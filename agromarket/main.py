"""
Module principal de l'application FastAPI AgroMarket.

Configure l'instance FastAPI, ajoute le middleware CORS, inclut les routeurs
(authentification, panier, commandes) et installe les gestionnaires d'erreurs
qui traduisent toute réponse d'erreur dans l'enveloppe commune.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from agromarket.auth.router import auth_router
from agromarket.carts.router import cart_router
from agromarket.config import settings
from agromarket.core.exceptions import MarketplaceException
from agromarket.core.schemas import error_payload
from agromarket.database import create_tables
from agromarket.orders.router import order_router

# Configurer le logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Démarrage de l'application: vérification des tables.")
    await create_tables()
    yield
    logger.info("Arrêt de l'application.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API du marketplace entre producteurs et consommateurs: panier, commandes et suivi des ventes.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ======================================================
# Gestionnaires d'erreurs
# ======================================================

@app.exception_handler(MarketplaceException)
async def marketplace_exception_handler(request: Request, exc: MarketplaceException):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message, exc.errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload("Données invalides", errors),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Erreur inattendue sur {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(settings.INTERNAL_ERROR_MSG),
    )

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(auth_router, prefix=settings.API_V1_PREFIX)
app.include_router(cart_router, prefix=settings.API_V1_PREFIX)
app.include_router(order_router, prefix=settings.API_V1_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"success": True, "message": "API opérationnelle"}
