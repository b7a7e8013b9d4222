"""
Authentication routes - login/logout.
"""

import asyncio
import time
from fastapi import APIRouter, Request, Form
from fastapi.responses import JSONResponse

from ..auth import verify_password
from ..dependencies import get_session_manager, get_settings

router = APIRouter()

# Brute force protection: failed login attempts tracked per client IP
LOCKOUT_THRESHOLD = 5  # Lock after 5 failed attempts
LOCKOUT_DURATION = 300  # 5 minutes in seconds


@router.post("/login")
async def login(request: Request, password: str = Form(...)):
    """Check the admin password and start a session."""
    settings = get_settings(request)
    session_manager = get_session_manager(request)
    failed_attempts = request.app.state.failed_logins
    client_ip = request.client.host if request.client else "unknown"
    current_time = time.time()
    
    # Forget attempts older than the lockout window
    failed_attempts[client_ip] = [
        attempt_time for attempt_time in failed_attempts[client_ip]
        if current_time - attempt_time < LOCKOUT_DURATION
    ]
    
    if len(failed_attempts[client_ip]) >= LOCKOUT_THRESHOLD:
        remaining = int(LOCKOUT_DURATION - (current_time - failed_attempts[client_ip][0]))
        return JSONResponse(
            {"success": False, "detail": f"Too many failed attempts. Try again in {remaining} seconds."},
            status_code=429
        )
    
    if settings.admin_password_hash and verify_password(password, settings.admin_password_hash):
        failed_attempts[client_ip] = []
        response = JSONResponse({"success": True})
        session_manager.create_session(response)
        return response
    
    failed_attempts[client_ip].append(current_time)
    
    # Slow down repeated guesses (grows with each attempt, capped at 3s)
    await asyncio.sleep(min(len(failed_attempts[client_ip]) * 0.5, 3))
    
    return JSONResponse({"success": False, "detail": "Invalid password"}, status_code=401)


@router.post("/logout")
async def logout(request: Request):
    """End the session."""
    response = JSONResponse({"success": True})
    get_session_manager(request).clear_session(response)
    return response
