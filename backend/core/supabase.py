from supabase import create_client, Client
from typing import Optional

from config.settings import Settings, get_settings

class SupabaseClient:
    _instance: Optional[Client] = None

    @classmethod
    def get_client(cls, settings: Optional[Settings] = None) -> Optional[Client]:
        """Shared client, or None when analytics storage is not configured"""
        settings = settings or get_settings()
        if not settings.analytics_configured:
            return None

        if cls._instance is None:
            cls._instance = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)

        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

# Convenience function to get the client
def get_supabase() -> Optional[Client]:
    return SupabaseClient.get_client()
