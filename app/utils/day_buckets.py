"""
Agrupamento de registros por dia (UTC) para séries temporais dos dashboards
"""
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional


MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def day_label(day: date) -> str:
    """Rótulo curto no formato 'Jan 5', independente do locale."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def utc_day(value: datetime) -> date:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date()


def group_by_day(
    records: Iterable[Any],
    days: int = 30,
    now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """
    Conta registros por dia nos últimos `days` dias, terminando hoje.

    Args:
        records: Objetos com atributo `created_at` (datetime ou None)
        days: Número de dias da série
        now: Instante de referência (padrão: agora em UTC)

    Returns:
        Lista com exatamente `days` itens {date, count, label}, do mais
        antigo para o mais recente, incluindo dias sem registros.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    today = utc_day(now)

    counts = Counter(
        utc_day(record.created_at)
        for record in records
        if record.created_at is not None
    )

    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        result.append({
            "date": day.isoformat(),
            "count": counts.get(day, 0),
            "label": day_label(day),
        })

    return result
