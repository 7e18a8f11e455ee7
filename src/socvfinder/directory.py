"""In-memory directory of locally known users.

The directory is a snapshot: each load builds a complete new mapping and
swaps it in with a single assignment, so readers see either the previous
snapshot or the new one, never a mix.
"""

from collections.abc import Mapping
from types import MappingProxyType

from socvfinder.contracts.errors import StoreError
from socvfinder.contracts.models import LoadResult, User
from socvfinder.core.logging import get_logger
from socvfinder.store.database import UserStore
from socvfinder.store.users import UserRepository

logger = get_logger(__name__)

_EMPTY: Mapping[int, User] = MappingProxyType({})


class UserDirectory:
    """Read-only, atomically replaced mapping of user id to User."""

    def __init__(self) -> None:
        self._snapshot: Mapping[int, User] = _EMPTY

    @property
    def snapshot(self) -> Mapping[int, User]:
        """Current snapshot (empty until the first successful load)."""
        return self._snapshot

    def get(self, user_id: int) -> User | None:
        return self._snapshot.get(user_id)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def reload(self, store: UserStore) -> Mapping[int, User]:
        """Replace the snapshot with the store's current users.

        Raises:
            StoreError: If the store cannot be read; the old snapshot stays
        """
        users = UserRepository(store).get_users()
        self._snapshot = MappingProxyType(users)
        logger.info("users_loaded", count=len(users))
        return self._snapshot

    def try_load(self, store: UserStore) -> LoadResult:
        """Like ``reload`` but reports store failures instead of raising."""
        try:
            users = self.reload(store)
        except StoreError as e:
            logger.error("users_load_failed", error=str(e))
            return LoadResult.failure(e)
        return LoadResult.success(len(users))
