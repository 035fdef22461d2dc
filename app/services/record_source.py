"""
Fontes de registros para o serviço de analytics.

- SupabaseRecordSource: leitura/escrita nas tabelas do Supabase
- InMemoryRecordSource: fonte em memória (modo DEV e testes)
"""
import copy
import logging
from datetime import datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence
from pydantic import TypeAdapter, ValidationError
from app.schemas.analytics import DateRange

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD = "created_at"

_timestamp_adapter = TypeAdapter(datetime)


class RecordSourceError(Exception):
    """Exceção genérica para erros da fonte de registros"""

    def __init__(self, set_name: str, message: str):
        self.set_name = set_name
        super().__init__(f"{set_name}: {message}")


class SourceReadError(RecordSourceError):
    """Exceção para falhas de leitura"""
    pass


class SourceWriteError(RecordSourceError):
    """Exceção para falhas de escrita"""
    pass


class RecordSource(Protocol):
    async def read(
        self,
        set_name: str,
        fields: Sequence[str],
        date_range: Optional[DateRange] = None
    ) -> List[Dict[str, Any]]:
        ...

    async def write(self, set_name: str, record: Dict[str, Any]) -> None:
        ...


def range_bounds(date_range: DateRange) -> tuple[datetime, datetime]:
    """
    Limites inclusivos do filtro de created_at.
    O limite superior cobre o dia final inteiro.
    """
    lower = datetime.combine(date_range.start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(date_range.end, time.max, tzinfo=timezone.utc)
    return lower, upper


class SupabaseRecordSource:
    """
    Fonte de registros sobre o cliente assíncrono do Supabase.
    """

    def __init__(self, client):
        self.client = client

    async def read(
        self,
        set_name: str,
        fields: Sequence[str],
        date_range: Optional[DateRange] = None
    ) -> List[Dict[str, Any]]:
        try:
            query = self.client.table(set_name).select(", ".join(fields))

            if date_range:
                lower, upper = range_bounds(date_range)
                query = (
                    query
                    .gte(TIMESTAMP_FIELD, lower.isoformat())
                    .lte(TIMESTAMP_FIELD, upper.isoformat())
                )

            response = await query.execute()
        except Exception as e:
            logger.error(f"Error reading '{set_name}' from Supabase: {e}")
            raise SourceReadError(set_name, str(e)) from e

        return response.data or []

    async def write(self, set_name: str, record: Dict[str, Any]) -> None:
        try:
            await self.client.table(set_name).insert(record).execute()
        except Exception as e:
            logger.error(f"Error writing to '{set_name}' in Supabase: {e}")
            raise SourceWriteError(set_name, str(e)) from e


class InMemoryRecordSource:
    """
    Fonte em memória com a mesma semântica de filtro do Supabase.
    Permite simular falhas por tabela.
    """

    def __init__(self, rows: Optional[Dict[str, Iterable[Dict[str, Any]]]] = None):
        self.rows: Dict[str, List[Dict[str, Any]]] = {
            name: list(items) for name, items in (rows or {}).items()
        }
        self.failing_reads: set = set()
        self.failing_writes: set = set()
        self.read_calls: List[str] = []

    def fail_reads(self, *set_names: str) -> None:
        self.failing_reads.update(set_names)

    def fail_writes(self, *set_names: str) -> None:
        self.failing_writes.update(set_names)

    async def read(
        self,
        set_name: str,
        fields: Sequence[str],
        date_range: Optional[DateRange] = None
    ) -> List[Dict[str, Any]]:
        self.read_calls.append(set_name)

        if set_name in self.failing_reads:
            raise SourceReadError(set_name, "simulated read failure")

        rows = self.rows.get(set_name, [])
        if date_range:
            lower, upper = range_bounds(date_range)
            rows = [row for row in rows if self._in_range(row, lower, upper)]

        return [
            {field: copy.deepcopy(row.get(field)) for field in fields}
            for row in rows
        ]

    async def write(self, set_name: str, record: Dict[str, Any]) -> None:
        if set_name in self.failing_writes:
            raise SourceWriteError(set_name, "simulated write failure")
        self.rows.setdefault(set_name, []).append(copy.deepcopy(record))

    def _in_range(self, row: Dict[str, Any], lower: datetime, upper: datetime) -> bool:
        value = row.get(TIMESTAMP_FIELD)
        if value is None:
            return False
        try:
            created_at = _timestamp_adapter.validate_python(value)
        except ValidationError:
            return False
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return lower <= created_at <= upper
