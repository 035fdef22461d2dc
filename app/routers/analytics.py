"""
Router para endpoints de analytics dos dashboards administrativos
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from app.dependencies import get_analytics_service, get_date_range
from app.schemas.analytics import (
    CacheStats,
    ContentQualityMetrics,
    DashboardSummary,
    DateRange,
    PlatformActivityMetrics,
    TrackEventRequest,
    UploadMetrics,
    UserGrowthMetrics,
)
from app.services.analytics_service import AnalyticsService
from app.services.record_source import SourceReadError

logger = logging.getLogger(__name__)
router = APIRouter()


def _source_unavailable(e: SourceReadError, detail: str) -> HTTPException:
    logger.error(f"{detail}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail
    )


@router.get("/analytics/user-growth", response_model=UserGrowthMetrics)
async def user_growth(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Métricas de crescimento de usuários.

    Inclui totais por perfil (farmer/admin), cadastros nos últimos 7 e 30
    dias, taxas de crescimento e série diária dos últimos 30 dias.
    """
    try:
        return await service.get_user_growth_metrics(date_range)
    except SourceReadError as e:
        raise _source_unavailable(e, "Erro ao buscar métricas de usuários")


@router.get("/analytics/uploads", response_model=UploadMetrics)
async def uploads(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Métricas de uploads: contagem por status, taxas de aprovação e
    rejeição, distribuição por cultura e série diária.
    """
    try:
        return await service.get_upload_metrics(date_range)
    except SourceReadError as e:
        raise _source_unavailable(e, "Erro ao buscar métricas de uploads")


@router.get("/analytics/platform-activity", response_model=PlatformActivityMetrics)
async def platform_activity(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Totais de usuários, uploads, esquemas e contatos com tendência de 7 dias."""
    try:
        return await service.get_platform_activity_metrics(date_range)
    except SourceReadError as e:
        raise _source_unavailable(e, "Erro ao buscar atividade da plataforma")


@router.get("/analytics/content-quality", response_model=ContentQualityMetrics)
async def content_quality(
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Revisões, feedbacks e tempo médio de resposta dos uploads."""
    try:
        return await service.get_content_quality_metrics()
    except SourceReadError as e:
        raise _source_unavailable(e, "Erro ao buscar qualidade do conteúdo")


@router.get("/analytics/dashboard-summary", response_model=DashboardSummary)
async def dashboard_summary(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Resumo completo do dashboard.

    Falha inteira se qualquer uma das métricas falhar (sem resultado parcial).
    """
    try:
        return await service.generate_dashboard_summary(date_range)
    except SourceReadError as e:
        raise _source_unavailable(e, "Erro ao gerar resumo do dashboard")


@router.post("/analytics/events", status_code=status.HTTP_202_ACCEPTED)
async def track_event(
    event: TrackEventRequest,
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Registra um evento customizado. Nunca falha por erro no armazenamento."""
    await service.track_event(event.event_type, event.metadata)
    return {"accepted": True}


@router.delete("/analytics/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Limpa o cache de analytics"""
    service.clear_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/analytics/cache/stats", response_model=CacheStats)
async def cache_stats(
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Estatísticas do cache de analytics"""
    return service.cache.stats()
