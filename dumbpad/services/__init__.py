# Services package init
"""
DumbPad Backend — Services Layer
==================================

Service Inventory:
    - RateLimiter: per-client failed PIN attempts and lockout
    - credentials: PIN format check and constant-time comparison
    - AccessGate: gate decision, PIN verification, PIN status
    - NotepadRegistry: notepads.json read-modify-write
    - NoteStore: per-notepad text content
    - FileService: data directory access with atomic writes
"""
