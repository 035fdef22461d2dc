"""
Dependências do FastAPI
"""
import logging
from datetime import date
from typing import Optional
from fastapi import HTTPException, Query, status
from pydantic import ValidationError
from app.config import settings
from app.database.supabase import get_supabase, supabase_configured
from app.schemas.analytics import DateRange
from app.services.analytics_service import AnalyticsService
from app.services.metrics_cache import MetricsCache
from app.services.record_source import (
    InMemoryRecordSource,
    RecordSource,
    SupabaseRecordSource,
)

logger = logging.getLogger(__name__)

# Instância única por processo (o cache vive junto com o serviço)
_analytics_service: Optional[AnalyticsService] = None


def is_development() -> bool:
    return settings.ENVIRONMENT == "development"


async def get_record_source() -> RecordSource:
    """
    Retorna a fonte de registros configurada.
    Em DEV_MODE sem Supabase configurado, usa fonte em memória vazia.
    """
    if not supabase_configured() and settings.DEV_MODE:
        if is_development():
            logger.warning("Supabase not configured, using in-memory record source")
        else:
            logger.error(
                f"Supabase not configured in {settings.ENVIRONMENT}, "
                "serving metrics from an empty in-memory record source"
            )
        return InMemoryRecordSource()

    client = await get_supabase()
    return SupabaseRecordSource(client)


async def get_analytics_service() -> AnalyticsService:
    global _analytics_service

    if _analytics_service is None:
        source = await get_record_source()
        # Outra requisição pode ter criado o serviço durante o await
        if _analytics_service is not None:
            return _analytics_service
        cache = MetricsCache(
            timeout=settings.ANALYTICS_CACHE_TIMEOUT_SECONDS,
            max_entries=settings.ANALYTICS_CACHE_MAX_ENTRIES,
        )
        _analytics_service = AnalyticsService(source, cache=cache)
        logger.info("Analytics service initialized")

    return _analytics_service


def reset_analytics_service() -> None:
    """Descarta a instância atual (usado no shutdown)."""
    global _analytics_service
    _analytics_service = None


def get_date_range(
    start: Optional[date] = Query(None, description="Data inicial (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Data final (YYYY-MM-DD)"),
) -> Optional[DateRange]:
    """Período opcional; start e end devem ser informados juntos."""
    if start is None and end is None:
        return None

    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Informe start e end juntos"
        )

    try:
        return DateRange(start=start, end=end)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start deve ser anterior ou igual a end"
        )
