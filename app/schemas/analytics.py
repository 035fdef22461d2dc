"""
Schemas Pydantic para analytics
"""
from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import Any, Dict, List, Optional


class DateRange(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("start must be on or before end")
        return self

    def cache_suffix(self) -> str:
        return f"{self.start.isoformat()}_{self.end.isoformat()}"


class DayBucket(BaseModel):
    date: str
    count: int
    label: str


class UserGrowthMetrics(BaseModel):
    total_users: int
    farmers_count: int
    admins_count: int
    last_30_days: int
    last_7_days: int
    growth_rate_30_days: float
    growth_rate_7_days: float
    daily_data: List[DayBucket]


class UploadMetrics(BaseModel):
    total_uploads: int
    pending_uploads: int
    approved_uploads: int
    rejected_uploads: int
    approval_rate: float
    rejection_rate: float
    crop_type_distribution: Dict[str, int]
    daily_data: List[DayBucket]


class PlatformActivityMetrics(BaseModel):
    total_users: int
    total_uploads: int
    total_schemes: int
    total_contacts: int
    user_growth_trend: List[DayBucket]
    upload_trend: List[DayBucket]


class ContentQualityMetrics(BaseModel):
    total_reviewed: int
    total_with_feedback: int
    feedback_rate: float
    avg_response_time: str


class DashboardSummary(BaseModel):
    user_metrics: UserGrowthMetrics
    upload_metrics: UploadMetrics
    platform_metrics: PlatformActivityMetrics
    quality_metrics: ContentQualityMetrics
    generated_at: str


class TrackEventRequest(BaseModel):
    event_type: str = Field(..., min_length=1)
    metadata: Optional[Dict[str, Any]] = None


class CacheStats(BaseModel):
    entries: int
    hits: int
    misses: int
    timeout_seconds: float
    max_entries: Optional[int] = None
