"""
DumbPad Backend — Route Dependencies
======================================

What:  FastAPI Depends() providers for the per-application services.
How:   create_app() builds one instance of each service and stores it on
       app.state; these functions hand them to route handlers. Tests build
       their own app (and therefore their own services) per test.
"""

from fastapi import Request

from dumbpad.config import Settings
from dumbpad.services.access_gate import AccessGate
from dumbpad.services.note_store import NoteStore
from dumbpad.services.registry import NotepadRegistry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def get_registry(request: Request) -> NotepadRegistry:
    return request.app.state.registry


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.note_store


def get_client_id(request: Request) -> str:
    """
    Identify the caller for lockout tracking.

    The raw peer address, unless TRUST_PROXY is enabled, in which case the
    first (client-most) X-Forwarded-For entry wins.
    """
    settings: Settings = request.app.state.settings
    if settings.trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"
