"""User account entity as provided by the identity layer."""

from dataclasses import dataclass, field

ANONYMOUS_USER_ID = "0"


@dataclass
class Account:
    """The user an access decision is made for.

    Attributes:
        id: User ID. '0' is the anonymous user.
        permissions: Platform-wide permissions of the user, independent of
            any group (e.g., 'administer group').
    """

    id: str
    permissions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.permissions = frozenset(self.permissions)

    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS_USER_ID

    def is_authenticated(self) -> bool:
        return not self.is_anonymous()


def anonymous_account() -> Account:
    return Account(id=ANONYMOUS_USER_ID)
