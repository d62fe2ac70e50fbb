"""Current account management using ContextVars.

Stores the account an operation runs for, so the access resolver can
default to it without explicit parameter passing.
"""

from contextvars import ContextVar
from typing import Optional

from groupaccess.domain.entities.account import Account

_current_account: ContextVar[Optional[Account]] = ContextVar(
    "current_account", default=None
)


def get_current_account() -> Optional[Account]:
    """Get the current account, or None if not set."""
    return _current_account.get()


def set_current_account(account: Account) -> None:
    _current_account.set(account)


def clear_current_account() -> None:
    _current_account.set(None)
