"""Identity providers.

The access resolver never authenticates users itself; it asks an identity
provider who the current user is and which platform-wide capabilities the
user holds.
"""

from abc import ABC, abstractmethod

from groupaccess.core.config import get_settings
from groupaccess.core.context import get_current_account
from groupaccess.domain.entities.account import Account, anonymous_account


class IdentityProvider(ABC):
    """Abstract base class for identity providers."""

    @abstractmethod
    def current_user(self) -> Account:
        """Return the account of the current actor."""
        ...

    @abstractmethod
    def is_superuser(self, account: Account) -> bool:
        """Whether the account bypasses every access check."""
        ...

    @abstractmethod
    def has_permission(self, account: Account, permission: str) -> bool:
        """Whether the account holds a platform-wide permission."""
        ...


class SessionIdentityProvider(IdentityProvider):
    """Identity provider backed by the current account context variable.

    Falls back to the anonymous account when no account is set.
    """

    def __init__(self, superuser_id: str | None = None) -> None:
        self.superuser_id = str(superuser_id or get_settings().superuser_id)

    def current_user(self) -> Account:
        return get_current_account() or anonymous_account()

    def is_superuser(self, account: Account) -> bool:
        return account.id == self.superuser_id

    def has_permission(self, account: Account, permission: str) -> bool:
        return permission in account.permissions
