from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from app.config import settings
from app.database.supabase import close_supabase, supabase_configured
from app.dependencies import get_analytics_service, is_development, reset_analytics_service
from app.routers import analytics
from app.services.record_source import InMemoryRecordSource

# Configurar logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting FarmTech Analytics API ({settings.ENVIRONMENT})")
    yield
    reset_analytics_service()
    await close_supabase()
    logger.info("FarmTech Analytics API stopped")


app = FastAPI(
    title="FarmTech Analytics API",
    description="Métricas dos dashboards administrativos do FarmTech",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir routers
app.include_router(analytics.router, prefix=settings.API_V1_PREFIX, tags=["analytics"])


@app.get("/")
async def root():
    return {"message": "FarmTech Analytics API está funcionando!"}


@app.get("/health")
async def health():
    """Health check básico"""
    return {"status": "healthy"}


@app.get("/health/live")
async def health_live():
    """Liveness check - verifica se a aplicação está viva"""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness check - verifica se a fonte de registros está disponível"""
    try:
        service = await get_analytics_service()
        if isinstance(service.source, InMemoryRecordSource) and not is_development():
            return JSONResponse(
                status_code=503,
                content={
                    "status": "not ready",
                    "error": "Supabase not configured, in-memory record source in use",
                }
            )
        return {
            "status": "ready",
            "record_source": type(service.source).__name__,
            "supabase_configured": supabase_configured(),
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "error": str(e)}
        )
