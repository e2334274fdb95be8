"""
MemoPad Backend — Application Package Initializer
==================================================

What: Marks the `memopad` directory as a Python package.
Why:  Enables module imports like `from memopad.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows the same layered shape for every request:

    ┌─────────────────────────────────────┐
    │   Middleware (origin gate, logging) │  ← cross-cutting, before routing
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (MemoStore adapter)    │  ← parameterized SQL, error wrapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy table + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
