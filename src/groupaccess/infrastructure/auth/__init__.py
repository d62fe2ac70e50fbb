"""Identity integration."""

from groupaccess.infrastructure.auth.identity import (
    IdentityProvider,
    SessionIdentityProvider,
)

__all__ = ["IdentityProvider", "SessionIdentityProvider"]
