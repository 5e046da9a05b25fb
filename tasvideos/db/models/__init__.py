"""
ORM models for the publication catalog and for users, roles and permissions.

Importing this package ensures model classes are registered with the Base
metadata for schema creation and runtime usage.
"""

from .enums import PermissionTo  # noqa: F401
from .security import (  # noqa: F401
    User,
    Role,
    UserRole,
    RolePermission,
)
from .publications import (  # noqa: F401
    GameSystem,
    PublicationClass,
    Genre,
    Flag,
    Game,
    Publication,
    game_genres,
    publication_authors,
    publication_flags,
)
