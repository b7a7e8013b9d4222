"""
Authentication module.
"""

from .password import hash_password, verify_password
from .session import SessionManager, SESSION_COOKIE_NAME

__all__ = [
    "hash_password",
    "verify_password",
    "SessionManager",
    "SESSION_COOKIE_NAME",
]
