"""
DumbPad Backend — PIN and Site Config Route Handlers
======================================================

What:  The three endpoints reachable without a PIN:
       POST /api/verify-pin, GET /api/pin-required, GET /api/config.
How:   Delegates to AccessGate; errors propagate as DumbPadError subclasses
       and are rendered by the global handlers in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from dumbpad.config import Settings
from dumbpad.dependencies import get_access_gate, get_client_id, get_settings
from dumbpad.schemas.notepad import (
    ErrorResponse,
    PinStatusResponse,
    SiteConfigResponse,
    SuccessResponse,
    VerifyPinRequest,
)
from dumbpad.services.access_gate import AccessGate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/verify-pin",
    response_model=SuccessResponse,
    responses={
        400: {"description": "PIN is not 4-10 digits", "model": ErrorResponse},
        401: {"description": "Wrong PIN", "model": ErrorResponse},
        429: {"description": "Too many failed attempts", "model": ErrorResponse},
    },
    summary="Verify the shared PIN",
)
async def verify_pin(
    body: Optional[VerifyPinRequest] = Body(default=None),
    gate: AccessGate = Depends(get_access_gate),
    client_id: str = Depends(get_client_id),
) -> SuccessResponse:
    """
    Check a PIN and report success.

    Always succeeds when no PIN is configured. Failed attempts count towards
    the caller's lockout; a successful one clears it.
    """
    gate.verify(body.pin if body else None, client_id)
    return SuccessResponse(success=True)


@router.get(
    "/pin-required",
    response_model=PinStatusResponse,
    summary="Whether a PIN is needed and whether the caller is locked out",
)
async def pin_required(
    gate: AccessGate = Depends(get_access_gate),
    client_id: str = Depends(get_client_id),
) -> PinStatusResponse:
    return gate.status(client_id)


@router.get(
    "/config",
    response_model=SiteConfigResponse,
    summary="Site title and public base URL",
)
async def site_config(settings: Settings = Depends(get_settings)) -> SiteConfigResponse:
    return SiteConfigResponse(
        site_title=settings.site_title,
        base_url=settings.public_base_url,
    )
