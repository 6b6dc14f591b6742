"""
SubsAPI: Application Package Initializer
==========================================

What: Subscription tracking service. Stores per-user recurring subscriptions
      and answers "how much, and for how many distinct months, was service X
      active between A and B?"

Architecture Note:
    The package follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, orchestration,
    │                                     │    overlap accounting
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The overlap engine (services/overlap.py) sits below the service layer and
    has no dependency on HTTP or the database.
"""

__version__ = "1.0.0"
