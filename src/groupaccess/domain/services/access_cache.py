"""Two-tier cache of resolved group permissions.

Entries are keyed by (group_type, group_bundle, group_id, user_id); unsaved
groups share an empty group_id and are told apart by their bundle. Tiers:
- pre_alter: the permissions granted by the user's roles in the group.
- post_alter: per operation, the permissions after access alter hooks ran.

Entries live until reset(); there is no partial invalidation. A cached value
is a deterministic function of its key, so concurrent fills are resolved by
last write wins.
"""

import threading

CacheKey = tuple[str, str, str, str]


class AccessCache:
    """Thread-safe two-tier permission cache."""

    def __init__(self) -> None:
        self._pre_alter: dict[CacheKey, frozenset[str]] = {}
        self._post_alter: dict[CacheKey, dict[str, frozenset[str]]] = {}
        self._lock = threading.RLock()

    @staticmethod
    def make_key(group_type: str, group_bundle: str, group_id: str, user_id: str) -> CacheKey:
        return (group_type, group_bundle, str(group_id), str(user_id))

    def get_pre_alter(self, key: CacheKey) -> frozenset[str] | None:
        """Get the permissions granted by the user's roles, if cached."""
        with self._lock:
            return self._pre_alter.get(key)

    def set_pre_alter(self, key: CacheKey, permissions: set[str] | frozenset[str]) -> None:
        with self._lock:
            self._pre_alter[key] = frozenset(permissions)

    def get_post_alter(self, key: CacheKey, operation: str) -> frozenset[str] | None:
        """Get the altered permissions computed for an operation, if cached."""
        with self._lock:
            return self._post_alter.get(key, {}).get(operation)

    def set_post_alter(
        self, key: CacheKey, operation: str, permissions: set[str] | frozenset[str]
    ) -> None:
        with self._lock:
            self._post_alter.setdefault(key, {})[operation] = frozenset(permissions)

    def reset(self) -> None:
        """Clear both tiers."""
        with self._lock:
            self._pre_alter.clear()
            self._post_alter.clear()

    def size(self) -> int:
        """Number of cached pre-alter and post-alter entries."""
        with self._lock:
            return len(self._pre_alter) + sum(
                len(operations) for operations in self._post_alter.values()
            )
