"""Backing user store: connection, schema, repository."""

from socvfinder.store.database import UserStore
from socvfinder.store.schema import metadata, users_table
from socvfinder.store.users import UserRepository

__all__ = [
    "UserRepository",
    "UserStore",
    "metadata",
    "users_table",
]
