"""
Serviço de analytics dos dashboards administrativos com cache em memória
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError
from app.schemas.analytics import DateRange
from app.schemas.records import (
    ContactRecord,
    SchemeRecord,
    UploadRecord,
    UserRecord,
)
from app.services.metrics_cache import MetricsCache
from app.services.record_source import RecordSource, SourceReadError
from app.utils.day_buckets import group_by_day

logger = logging.getLogger(__name__)

USERS = "users"
UPLOADS = "uploads"
SCHEMES = "schemes"
CONTACTS = "contacts"
EVENTS = "analytics_metrics"

CONTENT_QUALITY_KEY = "content_quality_metrics"

RecordT = TypeVar("RecordT", bound=BaseModel)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: int, total: int) -> float:
    """Percentual com uma casa decimal; 0.0 quando total é zero."""
    if total <= 0:
        return 0.0
    rate = Decimal(part * 100) / Decimal(total)
    return float(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def cache_key(family: str, date_range: Optional[DateRange]) -> str:
    suffix = date_range.cache_suffix() if date_range else "all"
    return f"{family}_{suffix}"


class AnalyticsService:
    """
    Agrega métricas a partir da fonte de registros.

    Cada método de leitura consulta o cache antes de ir à fonte e grava o
    resultado depois. Erros de leitura (SourceReadError) são propagados
    sem retry; track_event nunca propaga erros.
    """

    def __init__(
        self,
        source: RecordSource,
        cache: Optional[MetricsCache] = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.source = source
        self.cache = cache if cache is not None else MetricsCache()
        self.now = now

    async def _fetch(
        self,
        set_name: str,
        fields: List[str],
        model: Type[RecordT],
        date_range: Optional[DateRange] = None
    ) -> List[RecordT]:
        rows = await self.source.read(set_name, fields, date_range)
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise SourceReadError(set_name, f"malformed row: {e}") from e

    def _cached(self, key: str) -> Optional[Dict[str, Any]]:
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Using cached analytics for {key}")
        return cached

    def _store(self, key: str, metrics: Dict[str, Any]) -> Dict[str, Any]:
        self.cache.set(key, metrics)
        logger.info(f"Cached analytics for {key}")
        return metrics

    # Crescimento de usuários

    async def get_user_growth_metrics(
        self,
        date_range: Optional[DateRange] = None
    ) -> Dict[str, Any]:
        key = cache_key("user_growth", date_range)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            users = await self._fetch(USERS, ["created_at", "role"], UserRecord, date_range)
        except SourceReadError as e:
            logger.error(f"Error fetching user growth metrics: {e}")
            raise

        return self._store(key, self.process_user_growth(users))

    def process_user_growth(self, users: List[UserRecord]) -> Dict[str, Any]:
        now = self.now()
        thirty_days_ago = now - timedelta(days=30)
        seven_days_ago = now - timedelta(days=7)

        total_users = len(users)
        farmers_count = sum(1 for u in users if u.role == "farmer")
        admins_count = sum(1 for u in users if u.role == "admin")

        last_30_days = sum(
            1 for u in users
            if u.created_at is not None and u.created_at >= thirty_days_ago
        )
        last_7_days = sum(
            1 for u in users
            if u.created_at is not None and u.created_at >= seven_days_ago
        )

        return {
            "total_users": total_users,
            "farmers_count": farmers_count,
            "admins_count": admins_count,
            "last_30_days": last_30_days,
            "last_7_days": last_7_days,
            "growth_rate_30_days": percentage(last_30_days, total_users),
            "growth_rate_7_days": percentage(last_7_days, total_users),
            "daily_data": group_by_day(users, 30, now=now),
        }

    # Uploads

    async def get_upload_metrics(
        self,
        date_range: Optional[DateRange] = None
    ) -> Dict[str, Any]:
        key = cache_key("upload_metrics", date_range)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            uploads = await self._fetch(
                UPLOADS, ["created_at", "status", "crop_type"], UploadRecord, date_range
            )
        except SourceReadError as e:
            logger.error(f"Error fetching upload metrics: {e}")
            raise

        return self._store(key, self.process_uploads(uploads))

    def process_uploads(self, uploads: List[UploadRecord]) -> Dict[str, Any]:
        total_uploads = len(uploads)
        pending_uploads = sum(1 for u in uploads if u.status == "pending")
        approved_uploads = sum(1 for u in uploads if u.status == "approved")
        rejected_uploads = sum(1 for u in uploads if u.status == "rejected")

        # Distribuição por cultura, na ordem em que aparecem
        crop_type_distribution: Dict[str, int] = {}
        for upload in uploads:
            crop_type = upload.crop_type or "Unknown"
            crop_type_distribution[crop_type] = crop_type_distribution.get(crop_type, 0) + 1

        return {
            "total_uploads": total_uploads,
            "pending_uploads": pending_uploads,
            "approved_uploads": approved_uploads,
            "rejected_uploads": rejected_uploads,
            "approval_rate": percentage(approved_uploads, total_uploads),
            "rejection_rate": percentage(rejected_uploads, total_uploads),
            "crop_type_distribution": crop_type_distribution,
            "daily_data": group_by_day(uploads, 30, now=self.now()),
        }

    # Atividade da plataforma

    async def get_platform_activity_metrics(
        self,
        date_range: Optional[DateRange] = None
    ) -> Dict[str, Any]:
        key = cache_key("platform_activity", date_range)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            users, uploads, schemes, contacts = await asyncio.gather(
                self._fetch(USERS, ["created_at"], UserRecord, date_range),
                self._fetch(UPLOADS, ["created_at"], UploadRecord, date_range),
                self._fetch(SCHEMES, ["created_at"], SchemeRecord, date_range),
                self._fetch(CONTACTS, ["id", "created_at"], ContactRecord, date_range),
            )
        except SourceReadError as e:
            logger.error(f"Error fetching platform activity metrics: {e}")
            raise

        now = self.now()
        metrics = {
            "total_users": len(users),
            "total_uploads": len(uploads),
            "total_schemes": len(schemes),
            "total_contacts": len(contacts),
            "user_growth_trend": group_by_day(users, 7, now=now),
            "upload_trend": group_by_day(uploads, 7, now=now),
        }
        return self._store(key, metrics)

    # Qualidade do conteúdo

    async def get_content_quality_metrics(self) -> Dict[str, Any]:
        cached = self._cached(CONTENT_QUALITY_KEY)
        if cached is not None:
            return cached

        try:
            uploads = await self._fetch(
                UPLOADS, ["status", "admin_feedback", "created_at"], UploadRecord
            )
        except SourceReadError as e:
            logger.error(f"Error fetching content quality metrics: {e}")
            raise

        return self._store(CONTENT_QUALITY_KEY, self.process_content_quality(uploads))

    def process_content_quality(self, uploads: List[UploadRecord]) -> Dict[str, Any]:
        total_with_feedback = sum(
            1 for u in uploads
            if u.admin_feedback and u.admin_feedback.strip()
        )
        avg_response_time = self.average_response_time(uploads)

        return {
            "total_reviewed": sum(1 for u in uploads if u.status != "pending"),
            "total_with_feedback": total_with_feedback,
            "feedback_rate": percentage(total_with_feedback, len(uploads)),
            "avg_response_time": avg_response_time or "N/A",
        }

    def average_response_time(self, uploads: List[UploadRecord]) -> Optional[str]:
        """
        Idade média dos uploads já revisados, em horas (< 24h) ou dias.
        Retorna None se nenhum upload foi revisado.
        """
        reviewed = [
            u for u in uploads
            if u.status != "pending" and u.created_at is not None
        ]
        if not reviewed:
            return None

        now = self.now()
        total_hours = sum(
            (now - u.created_at).total_seconds() / 3600 for u in reviewed
        )
        avg_hours = total_hours / len(reviewed)

        if avg_hours < 24:
            return f"{round_half_up(avg_hours)} hours"
        return f"{round_half_up(avg_hours / 24)} days"

    # Resumo do dashboard

    async def generate_dashboard_summary(
        self,
        date_range: Optional[DateRange] = None
    ) -> Dict[str, Any]:
        try:
            user_metrics, upload_metrics, platform_metrics, quality_metrics = await asyncio.gather(
                self.get_user_growth_metrics(date_range),
                self.get_upload_metrics(date_range),
                self.get_platform_activity_metrics(date_range),
                self.get_content_quality_metrics(),
            )
        except Exception as e:
            logger.error(f"Error generating dashboard summary: {e}")
            raise

        return {
            "user_metrics": user_metrics,
            "upload_metrics": upload_metrics,
            "platform_metrics": platform_metrics,
            "quality_metrics": quality_metrics,
            "generated_at": self.now().isoformat(),
        }

    # Eventos

    async def track_event(
        self,
        event_type: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Registra um evento em analytics_metrics.
        Falhas são logadas e nunca propagadas.
        """
        record = {
            "metric_type": event_type,
            "value": 1,
            "date": self.now().date().isoformat(),
            "metadata": metadata if metadata is not None else {},
            "aggregation_type": "event",
        }
        try:
            await self.source.write(EVENTS, record)
        except Exception as e:
            logger.error(f"Error tracking event '{event_type}': {e}", exc_info=True)

    def clear_cache(self) -> None:
        self.cache.clear()
