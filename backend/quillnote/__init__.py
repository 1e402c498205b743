"""
Quillnote Backend — Application Package Initializer
====================================================

What: Marks the `quillnote` directory as a Python package.
Why:  Enables module imports like `from quillnote.config import settings`.
Who:  Used by Alembic, pytest, and uvicorn (`uvicorn quillnote.main:app`).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD rules, summarization
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The LLM providers (OpenAI, Gemini) sit beside the services layer behind
    the LLMService interface, so routes never talk to an SDK directly.
"""

__version__ = "1.0.0"
