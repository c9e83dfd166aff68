from fastapi import HTTPException, Request
from supabase import create_client, Client
from quickbom.config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """Build a client for the configured project. Prefers the service_role key when present."""
    key = settings.supabase_service_role_key or settings.supabase_key
    return create_client(settings.supabase_url, key)


def get_supabase(request: Request) -> Client:
    """Return the client the application constructed at startup."""
    supabase = getattr(request.app.state, "supabase", None)
    if supabase is None:
        raise HTTPException(status_code=503, detail="Database is not configured")
    return supabase
