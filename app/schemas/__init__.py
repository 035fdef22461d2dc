from app.schemas.analytics import (
    CacheStats,
    ContentQualityMetrics,
    DashboardSummary,
    DateRange,
    DayBucket,
    PlatformActivityMetrics,
    TrackEventRequest,
    UploadMetrics,
    UserGrowthMetrics,
)
from app.schemas.records import (
    ContactRecord,
    SchemeRecord,
    UploadRecord,
    UserRecord,
)

__all__ = [
    "CacheStats",
    "ContentQualityMetrics",
    "DashboardSummary",
    "DateRange",
    "DayBucket",
    "PlatformActivityMetrics",
    "TrackEventRequest",
    "UploadMetrics",
    "UserGrowthMetrics",
    "ContactRecord",
    "SchemeRecord",
    "UploadRecord",
    "UserRecord",
]
