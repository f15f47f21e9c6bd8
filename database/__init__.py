"""
Database Package for URL Keep-Alive

Provides database connectivity, the Target model, and the repository
used to persist keep-alive state with SQLAlchemy's async support.
"""

from database.manager import (
    DatabaseManager,
    TargetRepository,
)

from database.models import (
    Base,
    Target,
)

__all__ = [
    # Connection
    "DatabaseManager",

    # Models
    "Base",
    "Target",

    # Repositories
    "TargetRepository",
]
