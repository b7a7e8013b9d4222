"""
Cookie-based session management for the sync API.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, Response
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired


# Session duration: 12 hours
SESSION_MAX_AGE = 12 * 60 * 60  # seconds
SESSION_COOKIE_NAME = "rackbeat_sync_session"
SESSION_SALT = "rackbeat-sync-session"


class SessionManager:
    """Manages signed cookie-based operator sessions."""

    def __init__(
        self,
        secret_key: str,
        max_age: int = SESSION_MAX_AGE,
        secure_cookie: bool = False,
    ):
        """
        Initialize session manager.
        
        Args:
            secret_key: Secret key for signing cookies
            max_age: Session lifetime in seconds
            secure_cookie: Only send the cookie over HTTPS
        """
        self._serializer = URLSafeTimedSerializer(secret_key, salt=SESSION_SALT)
        self.max_age = max_age
        self.secure_cookie = secure_cookie

    def create_session(self, response: Response, operator: str = "admin") -> str:
        """
        Sign a new session and set it as a cookie on the response.
        
        Returns:
            The signed session token
        """
        token = self._serializer.dumps({
            "operator": operator,
            "issued_at": datetime.now(timezone.utc).isoformat(),
        })

        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=token,
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure_cookie,
        )
        return token

    def get_session(self, request: Request) -> Optional[dict]:
        """Session data from the request cookie, or None if missing, forged or expired."""
        token = request.cookies.get(SESSION_COOKIE_NAME)
        if not token:
            return None

        try:
            return self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None

    def clear_session(self, response: Response) -> None:
        response.delete_cookie(
            key=SESSION_COOKIE_NAME,
            httponly=True,
            samesite="lax",
        )

    def is_authenticated(self, request: Request) -> bool:
        return self.get_session(request) is not None
