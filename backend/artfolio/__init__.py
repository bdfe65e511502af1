"""
Artfolio Backend — Application Package Initializer
===================================================

What: Marks the `artfolio` directory as a Python package.
Who:  Imported by uvicorn (`artfolio.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │      Routes (HTTP, status codes)     │  ← thin handlers
    ├─────────────────────────────────────┤
    │  Dependencies (session, identity)    │  ← explicit request context
    ├─────────────────────────────────────┤
    │    Services (ownership, workflow)    │  ← business rules
    ├─────────────────────────────────────┤
    │    Models & Schemas (ORM / API)      │
    ├─────────────────────────────────────┤
    │   Database (async SQLAlchemy)        │
    └─────────────────────────────────────┘

    Routes never touch the database directly; services never build HTTP
    responses. Errors travel upward as ArtfolioError subclasses and are
    rendered by the global handlers in main.py.
"""

__version__ = "1.0.0"
