"""
Inkwell Backend: Application Package Initializer
=================================================

What: Marks the `inkwell` directory as a Python package.
Who:  Imported by uvicorn (`inkwell.main:app`), Alembic and pytest.

Architecture Note:
    The backend is a layered blogging API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (Token Verifier, deps)   │  ← Claim extraction
    ├─────────────────────────────────────┤
    │         Services (Business Rules)   │  ← Ownership checks, like toggle
    ├─────────────────────────────────────┤
    │     Repositories (Persistence)      │  ← Post lookups and writes
    ├─────────────────────────────────────┤
    │        Database (Sessions)          │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    Routes never touch SQL, services never touch HTTP objects, and the
    database engine is an explicit object owned by the application lifespan.
"""

__version__ = "1.0.0"
