"""
Conexão com o Supabase (cliente assíncrono)
"""
import logging
from supabase import AsyncClient, acreate_client
from app.config import settings

logger = logging.getLogger(__name__)

supabase_client = None


def supabase_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)


async def get_supabase() -> AsyncClient:
    """
    Retorna cliente Supabase singleton.
    Cria conexão se não existir.
    """
    global supabase_client

    if supabase_client is None:
        if not supabase_configured():
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")

        supabase_client = await acreate_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_KEY
        )
        logger.info(f"Supabase client created: {settings.SUPABASE_URL}")

    return supabase_client


async def close_supabase():
    """Descarta o cliente Supabase."""
    global supabase_client
    if supabase_client:
        supabase_client = None
        logger.info("Supabase client released")
