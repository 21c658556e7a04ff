"""
Journeo Backend — Application Package Initializer
==================================================

What: Marks the `journeo` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, identity extraction
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← Validation, access policy, persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The authenticated caller is resolved once per request in the route layer
    and handed to services as an explicit argument. No service reads ambient
    "current user" state.
"""

__version__ = "1.0.0"
