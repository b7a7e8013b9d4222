"""
FastAPI dependency injection.
Everything lives on app.state, set up by the application lifespan.
"""

from fastapi import Request, HTTPException

from .auth import SessionManager
from .config import Settings
from .db import SQLiteDatabase


def get_settings(request: Request) -> Settings:
    """Get the settings the app was built with."""
    return request.app.state.settings


def get_db(request: Request) -> SQLiteDatabase:
    """Get the database instance."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database not initialized")
    return db


def get_session_manager(request: Request) -> SessionManager:
    """Get the session manager instance."""
    session_manager = getattr(request.app.state, "session_manager", None)
    if session_manager is None:
        raise RuntimeError("Session manager not initialized")
    return session_manager


async def require_auth(request: Request):
    """Dependency that rejects requests without a valid session."""
    if not get_session_manager(request).is_authenticated(request):
        raise HTTPException(status_code=401, detail="Not authenticated")
