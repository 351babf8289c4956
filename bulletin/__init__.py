"""
Bulletin Board API — Application Package Initializer
=====================================================

What: Marks the `bulletin` directory as a Python package.
Who:  Imported by the serverless entry point, uvicorn, Alembic and pytest.

Architecture Note:
    The service is organised in thin layers:

    ┌─────────────────────────────────────┐
    │  Entry points (Lambda / FastAPI)    │  ← turn transport input into events
    ├─────────────────────────────────────┤
    │  Router + Envelope                  │  ← classify event, normalise output
    ├─────────────────────────────────────┤
    │  Route handlers                     │  ← validate body, call one service
    ├─────────────────────────────────────┤
    │  Services (posts, media, analysis)  │  ← one statement / one vendor call
    ├─────────────────────────────────────┤
    │  Database (async SQLAlchemy)        │  ← pooled sessions
    └─────────────────────────────────────┘

    Process-wide collaborators (engine, vendor clients) are owned by
    `bulletin.container.AppContainer` and handed to the router explicitly.
"""

__version__ = "1.0.0"
