"""
DumbPad Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract and the on-disk registry format.
How:   FastAPI validates request bodies and serializes responses with these
       models. NotepadRegistry also validates notepads.json through `Registry`,
       so a structurally broken file is detected in one place.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


DEFAULT_NOTEPAD_ID = "default"
DEFAULT_NOTEPAD_NAME = "Default Notepad"


# ══════════════════════════════════════════════════════════════════════════
# Domain Models — persisted in notepads.json
# ══════════════════════════════════════════════════════════════════════════


class Notepad(BaseModel):
    """
    What:  One named notepad. `id` is immutable; `name` changes on rename.
    Who:   Returned by POST /api/notepads and PUT /api/notepads/{id}.
    """
    id: str = Field(description="Stable notepad identifier ('default' or a ms timestamp)")
    name: str = Field(description="Display name")


class Registry(BaseModel):
    """
    What:  Envelope around the ordered notepad list (creation order).
    Who:   Returned by GET /api/notepads; also the notepads.json file format.
    """
    notepads: List[Notepad] = Field(description="All notepads, oldest first")

    @classmethod
    def initial(cls) -> "Registry":
        return cls(notepads=[Notepad(id=DEFAULT_NOTEPAD_ID, name=DEFAULT_NOTEPAD_NAME)])

    def find(self, notepad_id: str) -> Optional[Notepad]:
        for notepad in self.notepads:
            if notepad.id == notepad_id:
                return notepad
        return None


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class VerifyPinRequest(BaseModel):
    """
    Body of POST /api/verify-pin.

    `pin` is deliberately untyped: a number, list or null must reach the
    format check and come back as 400 invalid_pin_format rather than a 422.
    """
    pin: Any = None


class CreateNotepadRequest(BaseModel):
    """Optional body of POST /api/notepads."""
    name: Optional[str] = Field(default=None, description="Display name; defaults to 'Notepad N'")


class RenameNotepadRequest(BaseModel):
    name: str = Field(description="New display name")


class SaveNoteRequest(BaseModel):
    content: str = Field(description="Full note text; replaces the stored content")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SuccessResponse(BaseModel):
    success: bool = True


class DeleteNotepadResponse(BaseModel):
    success: bool = True
    message: str = "Notepad deleted successfully"


class NoteContentResponse(BaseModel):
    content: str = Field(description="Stored text, empty if never written")


class PinStatusResponse(BaseModel):
    """
    What:  Returned by GET /api/pin-required so the UI knows whether to prompt.
    Fields:
        required: A valid PIN is configured and the API is gated
        length:   Number of digits to render input boxes for (0 when no PIN)
        locked:   The calling client is currently locked out
    """
    required: bool
    length: int
    locked: bool


class SiteConfigResponse(BaseModel):
    """Returned by GET /api/config. Serialized with camelCase keys."""
    site_title: str = Field(serialization_alias="siteTitle")
    base_url: str = Field(serialization_alias="baseUrl")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for every non-2xx response.

    Example:
        {
            "success": false,
            "error": "unauthorized",
            "message": "Invalid PIN",
            "request_id": "1a2b3c4d"
        }
    """
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str
    data_dir: str = Field(description="Data directory status: writable, unavailable")
    uptime_seconds: float
