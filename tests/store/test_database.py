"""Tests for user store connection management."""

from pathlib import Path

import pytest


class TestUserStore:
    """Opening, closing and connections."""

    def test_create_tables(self, tmp_path: Path) -> None:
        from sqlalchemy import inspect

        from socvfinder.store import UserStore

        with UserStore(f"sqlite:///{tmp_path / 'u.db'}", create_tables=True) as store:
            assert "users" in inspect(store.engine).get_table_names()

    def test_tables_not_created_by_default(self, tmp_path: Path) -> None:
        from sqlalchemy import inspect

        from socvfinder.store import UserStore

        with UserStore(f"sqlite:///{tmp_path / 'u.db'}") as store:
            assert "users" not in inspect(store.engine).get_table_names()

    def test_from_settings(self, tmp_path: Path) -> None:
        from socvfinder.core.config import StoreSettings
        from socvfinder.store import UserStore

        settings = StoreSettings(
            url=f"sqlite:///{tmp_path / 'u.db'}", create_tables=True
        )
        with UserStore.from_settings(settings) as store:
            assert not store.closed

    def test_invalid_url_raises_store_error(self) -> None:
        from socvfinder.contracts import StoreError
        from socvfinder.store import UserStore

        with pytest.raises(StoreError):
            UserStore("not a url")

    def test_unknown_driver_raises_store_error(self) -> None:
        from socvfinder.contracts import StoreError
        from socvfinder.store import UserStore

        with pytest.raises(StoreError):
            UserStore("nosuchdialect://host/db")

    def test_unreachable_store_raises_store_error(self, tmp_path: Path) -> None:
        from socvfinder.contracts import StoreError
        from socvfinder.store import UserStore

        with pytest.raises(StoreError):
            UserStore(f"sqlite:///{tmp_path / 'missing_dir' / 'u.db'}")

    def test_from_settings_malformed_url_raises_store_error(self) -> None:
        from socvfinder.contracts import StoreError
        from socvfinder.core.config import StoreSettings
        from socvfinder.store import UserStore

        with pytest.raises(StoreError, match="Invalid store URL"):
            UserStore.from_settings(StoreSettings(url="not a url"))

    def test_missing_dbapi_driver_raises_store_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from socvfinder.contracts import StoreError
        from socvfinder.store import UserStore, database

        def no_driver(*args: object, **kwargs: object) -> None:
            raise ModuleNotFoundError("No module named 'pymysql'")

        monkeypatch.setattr(database, "create_engine", no_driver)

        with pytest.raises(StoreError, match="pymysql") as exc_info:
            UserStore("mysql+pymysql://u:p@db.example.org/socvfinder")
        assert isinstance(exc_info.value.__cause__, ModuleNotFoundError)
        assert "u:p@" not in str(exc_info.value)

    def test_close_is_idempotent(self, store) -> None:
        store.close()
        store.close()
        assert store.closed

    def test_engine_after_close_raises(self, store) -> None:
        from socvfinder.contracts import StoreError

        store.close()
        with pytest.raises(StoreError):
            _ = store.engine

    def test_in_memory_shared_across_threads(self) -> None:
        import threading

        from sqlalchemy import func, select

        from socvfinder.store import UserStore, users_table

        store = UserStore.in_memory()
        with store.connection() as conn:
            conn.execute(users_table.insert(), [{"user_id": 1, "user_name": "a"}])

        counts: list[int] = []

        def count() -> None:
            with store.connection() as conn:
                counts.append(
                    conn.execute(select(func.count()).select_from(users_table)).scalar_one()
                )

        t = threading.Thread(target=count)
        t.start()
        t.join()
        store.close()

        assert counts == [1]
