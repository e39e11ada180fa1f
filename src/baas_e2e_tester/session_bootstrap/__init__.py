"""Session bootstrap exports."""

from .login_flow import (
    AUTHENTICATED_URL,
    SESSION_KEYS,
    AuthenticationFailed,
    authenticate,
    is_authenticated_url,
)
from .session_artifacts import SessionArtifact, load_existing_session

__all__ = [
    "AUTHENTICATED_URL",
    "SESSION_KEYS",
    "AuthenticationFailed",
    "SessionArtifact",
    "authenticate",
    "is_authenticated_url",
    "load_existing_session",
]
