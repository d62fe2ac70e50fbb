"""Group membership entity.

A membership links a user to one group instance. Active members implicitly
hold the 'member' role in addition to the roles listed on the membership;
everybody else implicitly holds the 'non-member' role.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


class MembershipState:
    """Membership states."""

    ACTIVE = "active"
    PENDING = "pending"
    BLOCKED = "blocked"

    ALL = (ACTIVE, PENDING, BLOCKED)


@dataclass
class Membership:
    """Membership of a user in a group.

    Attributes:
        user_id: ID of the member.
        group_type: Entity type of the group.
        group_bundle: Bundle of the group.
        group_id: ID of the group entity.
        state: One of MembershipState.ALL.
        roles: Names of the extra roles held in this group (e.g., 'administrator').
        id: Database ID, None until stored.
        created_at: Timestamp when the membership was created.
    """

    user_id: str
    group_type: str
    group_bundle: str
    group_id: str
    state: str = MembershipState.ACTIVE
    roles: list[str] = field(default_factory=list)
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.group_type or not self.group_bundle or not self.group_id:
            raise ValueError("Group type, bundle and ID are required")
        if self.state not in MembershipState.ALL:
            raise ValueError(f"'{self.state}' is not a valid membership state")

    def is_active(self) -> bool:
        return self.state == MembershipState.ACTIVE
