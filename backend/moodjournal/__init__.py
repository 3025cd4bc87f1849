"""
Mood Journal — Application Package
====================================

Server side (FastAPI):

    ┌─────────────────────────────────────┐
    │    Routes + Session dependency      │  ← HTTP concerns, authentication
    ├─────────────────────────────────────┤
    │   Services (Entry Store + rules)    │  ← ownership, validation, merge
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

Client side (`moodjournal.client`): credential resolution from token
storage, an httpx-based JSON wrapper, and a typed journal API client.
"""

__version__ = "1.0.0"
