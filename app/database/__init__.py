"""
Módulo de database: conexão com o Supabase
"""
from app.database.supabase import close_supabase, get_supabase, supabase_configured

__all__ = ['get_supabase', 'close_supabase', 'supabase_configured']
