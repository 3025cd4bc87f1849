# Routes package init
"""
HTTP route handlers.

Route Inventory:
    - entries.py: /api/journal/entries and /api/journal/entries/{id}
    - health.py:  GET /health

Routes stay thin: authenticate, call EntryService, pick the status code.
"""
