"""Session management models."""

import secrets
from datetime import datetime
from enum import StrEnum
from typing import NewType

from pydantic import BaseModel, Field

from loyalty.utils import now

SessionToken = NewType("SessionToken", str)

SESSION_KEY = "loyaltySessionToken"
SESSION_EXPIRED_MESSAGE = "Session expired due to inactivity. Please login again."


def new_session_token() -> SessionToken:
    return SessionToken(secrets.token_urlsafe(32))


class SessionState(StrEnum):
    """Authentication state of one browsing context."""

    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"
    EXPIRED = "expired"  # Logged out by the inactivity timer


class ActivityEvent(StrEnum):
    """User interaction signals that count as activity."""

    POINTER_DOWN = "pointerdown"
    MOUSE_DOWN = "mousedown"
    KEY_DOWN = "keydown"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    CLICK = "click"


class Session(BaseModel):
    """Operator session marker kept in per-tab storage."""

    token: SessionToken = Field(default_factory=new_session_token)
    created_at: datetime = Field(default_factory=now)
