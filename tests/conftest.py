"""
Fixtures compartilhadas dos testes de analytics
"""
import pytest
from datetime import datetime, timedelta, timezone
from app.services.analytics_service import AnalyticsService
from app.services.metrics_cache import MetricsCache
from app.services.record_source import InMemoryRecordSource

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def iso(days_ago: float = 0, hours_ago: float = 0) -> str:
    """Timestamp ISO-8601 relativo a FIXED_NOW"""
    return (FIXED_NOW - timedelta(days=days_ago, hours=hours_ago)).isoformat()


class FakeClock:
    """Relógio controlável para o cache"""

    def __init__(self, start: float = 1000.0):
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float):
        self.current += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return InMemoryRecordSource()


@pytest.fixture
def service(source, clock):
    return AnalyticsService(
        source,
        cache=MetricsCache(timeout=300, clock=clock),
        now=lambda: FIXED_NOW,
    )
