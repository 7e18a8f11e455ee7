"""Value types shared between the store, the directory and the service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """A locally known user.

    Only ``user_id`` matters to the core; the remaining attributes are
    carried for consumers.
    """

    user_id: int
    user_name: str | None = None
    access_level: int = 0


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a non-raising directory load.

    Use the factory methods to create instances.
    """

    loaded: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, loaded: int) -> "LoadResult":
        """Create a successful result with the number of users loaded."""
        return cls(loaded=loaded)

    @classmethod
    def failure(cls, error: Exception) -> "LoadResult":
        """Create a failed result carrying the error."""
        return cls(loaded=0, error=error)
