"""Hook context and result types for the hook system.

Contains the core data structures used by the hook system:
- HookContext: Context passed to all hook callbacks
- HookResult: Result of a hook trigger operation
"""

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from groupaccess.domain.entities.account import Account


@dataclass
class HookContext:
    """Context passed to all hook callbacks.

    Attributes:
        user: The account the operation is performed for, if any.
        request_id: Correlation ID for logging and tracing.

    Example:
        async def my_hook(event: str, data: dict, context: HookContext) -> dict:
            if context.user and context.user.id == "7":
                data["permissions"].add("update group")
            return data
    """

    user: Optional["Account"] = None
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"hk_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Result of a hook trigger operation.

    Attributes:
        success: Whether all hooks executed successfully.
        errors: List of error messages from hooks that failed.
        data: Data after passing through the hook chain.
    """

    success: bool = True
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
