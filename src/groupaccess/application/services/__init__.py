"""Application services."""

from groupaccess.application.services.group_access_service import GroupAccessService

__all__ = ["GroupAccessService"]
