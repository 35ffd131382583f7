"""Infrastructure layer: configuration, database access and logging."""

from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.database import Base, Database

__all__ = [
    "Base",
    "Database",
    "Settings",
    "get_settings",
]
