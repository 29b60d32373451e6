"""Infrastructure layer — SQLite document store, search index, link graph.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX).
It must never import from services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
