"""
DumbPad Backend — Application Package
=======================================

A minimal notepad service: named notepads with plain-text content, stored as
files in one data directory and optionally protected by a shared PIN.

    ┌─────────────────────────────────────┐
    │     Routes + Middleware (HTTP)      │  ← PIN gate, request IDs, access log
    ├─────────────────────────────────────┤
    │        Services (Business Logic)    │  ← access gate, lockout, registry, notes
    ├─────────────────────────────────────┤
    │           Schemas (Data)            │  ← Pydantic API + notepads.json models
    ├─────────────────────────────────────┤
    │      FileService (Persistence)      │  ← atomic text files under DATA_DIR
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
