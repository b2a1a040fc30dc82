# Routes package init
"""
DumbPad Backend — API Routes Package
======================================

Route Inventory:
    - auth.py:      POST /api/verify-pin, GET /api/pin-required, GET /api/config
    - notepads.py:  GET/POST /api/notepads, PUT/DELETE /api/notepads/{id}
    - notes.py:     GET/POST /api/notes/{id}
    - health.py:    GET /health

Routes stay thin: extract request data, call a service, return a schema.
"""
