"""GroupAccess - Group-scoped access control for content platforms.

Entities can be registered as groups, other entities affiliated with them
as group content, and users granted group-scoped roles that carry
permissions.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
