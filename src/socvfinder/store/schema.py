"""SQLAlchemy table definitions for the user store.

Uses SQLAlchemy Core (not ORM). The store is owned by the user-management
side of the application; the finder only reads it.
"""

from sqlalchemy import Column, Integer, MetaData, String, Table

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=False),
    Column("user_name", String(128)),
    Column("access_level", Integer, nullable=False, default=0),
)
