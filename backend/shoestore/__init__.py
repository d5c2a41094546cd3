"""
Shoe Store Backend — Application Package Initializer
====================================================

What: Marks the `shoestore` directory as a Python package.
Who:  Imported by uvicorn (`shoestore.main:app`), pytest, and the `shoestore` script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← verbs, query params, status codes
    ├─────────────────────────────────────┤
    │      Services (Record Store)        │  ← one MongoDB call per operation
    ├─────────────────────────────────────┤
    │       Schemas & Models (Data)       │  ← Pydantic models + document shape
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← AsyncMongoClient lifecycle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
