"""
Aplicación principal FastAPI de liquidaciones de alquileres.
"""
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .api.endpoints import payments, rental_periods, statements, taxes, units
from .api.middleware.audit import AuditLogMiddleware

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=settings.LOG_LEVEL,
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Crear aplicación
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Liquidaciones de Alquileres

    Motor de cálculo de la liquidación mensual por unidad y servicios
    asociados.

    ### Funcionalidades:
    - Cálculo de la liquidación mensual (total del mes, neto, gastos, neteado)
    - Validación de rubros
    - Totales por grupo de propiedades y Total General
    - Liquidación sugerida al registrar el cobro del mes
    - Superposición de alquileres
    - Estimación de IVA, Ingresos Brutos y Ganancias
    """,
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(AuditLogMiddleware)

# Incluir routers
app.include_router(statements.router, prefix="/api/v1")
app.include_router(rental_periods.router, prefix="/api/v1")
app.include_router(payments.router, prefix="/api/v1")
app.include_router(taxes.router, prefix="/api/v1")
app.include_router(units.router, prefix="/api/v1")

logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} iniciado")


@app.get("/")
async def root():
    """Endpoint raíz."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }


@app.get("/health")
async def health_check():
    """Health check para monitoreo."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


def run():
    """Levanta el servidor con uvicorn."""
    import uvicorn

    uvicorn.run(
        "liquidaciones.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
