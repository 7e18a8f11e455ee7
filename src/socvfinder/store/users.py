"""Read access to the users table."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from socvfinder.contracts.errors import StoreError
from socvfinder.contracts.models import User
from socvfinder.store.database import UserStore
from socvfinder.store.schema import users_table


class UserRepository:
    """Loads User records from the store."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    @staticmethod
    def load(row: Any) -> User:
        """Build a User from a database row."""
        return User(
            user_id=int(row.user_id),
            user_name=row.user_name,
            access_level=row.access_level if row.access_level is not None else 0,
        )

    def get_users(self) -> dict[int, User]:
        """Query every user, keyed by id.

        Raises:
            StoreError: If the query fails or the store is closed
        """
        try:
            with self.store.connection() as conn:
                rows = conn.execute(
                    select(users_table).order_by(users_table.c.user_id)
                ).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load users: {e}") from e
        return {user.user_id: user for user in map(self.load, rows)}
