from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
import os


load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    ask_leo_function: str
    ask_leo_timeout: float
    leo_diagnostics: bool
    demo_mode_available: bool


def _flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip() == "1"


def get_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL") or os.getenv("PG_URL") or None
    supabase_url = (os.getenv("SUPABASE_URL") or "").strip() or None
    supabase_anon_key = (os.getenv("SUPABASE_ANON_KEY") or "").strip() or None

    ask_leo_function = os.getenv("LEORA_ASK_LEO_FUNCTION", "ask_leo_v2")
    ask_leo_timeout = float(os.getenv("LEORA_ASK_LEO_TIMEOUT", "30"))

    return Settings(
        database_url=database_url,
        supabase_url=supabase_url,
        supabase_anon_key=supabase_anon_key,
        ask_leo_function=ask_leo_function,
        ask_leo_timeout=ask_leo_timeout,
        leo_diagnostics=_flag("LEORA_LEO_DIAGNOSTICS"),
        demo_mode_available=_flag("LEORA_DEMO_MODE_AVAILABLE"),
    )


def require_database_url(s: Settings) -> str:
    if not s.database_url:
        raise RuntimeError("Missing DATABASE_URL (or PG_URL)")
    return s.database_url


def require_supabase_env(s: Settings) -> tuple[str, str]:
    if not s.supabase_url or not s.supabase_anon_key:
        raise RuntimeError("Missing env: SUPABASE_URL / SUPABASE_ANON_KEY")
    return s.supabase_url, s.supabase_anon_key
