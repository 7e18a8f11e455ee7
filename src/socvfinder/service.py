# src/socvfinder/service.py
"""The finder service: one shared access point to the API and the user store.

The application's entry point owns a ServiceHolder (or uses the module
default) and hands the service to collaborators. Construction happens
once; later ``initialize`` calls return the existing instance.

Example:
    service = initialize(load_settings(Path("settings.yaml")))
    url = service.questions_url(page=1, tag="java")
    doc = service.fetch(url, notifier)
    service.api_quota = doc.get("quota_remaining", -1)
    ...
    shutdown()
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from socvfinder.api.fetcher import ThrottledFetcher
from socvfinder.api.throttle import Throttle
from socvfinder.api.urls import build_questions_url
from socvfinder.contracts.errors import StoreError, UninitializedServiceError
from socvfinder.contracts.models import LoadResult, User
from socvfinder.core.logging import get_logger
from socvfinder.directory import UserDirectory
from socvfinder.store.database import UserStore

if TYPE_CHECKING:
    import httpx

    from socvfinder.contracts.protocols import Notifier
    from socvfinder.core.config import FinderSettings

logger = get_logger(__name__)

UNKNOWN_QUOTA = -1


class FinderService:
    """Composes configuration, throttled fetcher, store and user directory."""

    def __init__(
        self,
        settings: FinderSettings,
        *,
        store: UserStore | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Build the service.

        Opens the store (unless one is given) and loads the users. Store
        failures here are logged and recorded in ``load_error``; the
        service still answers URL and API requests.

        Args:
            settings: Validated settings
            store: Already opened store (tests, embedding applications)
            transport: httpx transport for the fetcher (tests)
        """
        self._settings = settings
        self._api_quota = UNKNOWN_QUOTA
        self._default_page_size = settings.api.default_page_size
        self._store_lock = threading.RLock()
        self._directory = UserDirectory()
        self._fetcher = ThrottledFetcher(
            Throttle(settings.api.throttle_ms),
            timeout=settings.api.timeout_seconds,
            transport=transport,
        )
        self._shut_down = False

        self._store: UserStore | None = store
        self._load_result: LoadResult
        if self._store is None:
            try:
                self._store = UserStore.from_settings(settings.store)
            except StoreError as e:
                logger.error("store_open_failed", error=str(e))
                self._load_result = LoadResult.failure(e)
                return
        self._load_result = self._directory.try_load(self._store)

    # === Configuration ===

    @property
    def settings(self) -> FinderSettings:
        return self._settings

    @property
    def api_key(self) -> str | None:
        return self._settings.api.api_key

    @property
    def throttle_ms(self) -> int:
        """Minimum milliseconds between API call starts."""
        return self._settings.api.throttle_ms

    @property
    def report_url(self) -> str:
        """Endpoint collaborators post dump reports to."""
        return self._settings.api.report_url

    @property
    def call_pages(self) -> int:
        """Pages a consumer requests per scan."""
        return self._settings.api.call_pages

    @property
    def default_page_size(self) -> int:
        """Number of questions a consumer shows by default."""
        return self._default_page_size

    @default_page_size.setter
    def default_page_size(self, value: int) -> None:
        if value <= 0:
            raise ValueError(f"default_page_size must be > 0, got {value}")
        self._default_page_size = value

    @property
    def api_quota(self) -> int:
        """Remaining API calls as last reported by the server.

        Advisory only, -1 until a caller sets it from a response.
        """
        return self._api_quota

    @api_quota.setter
    def api_quota(self, value: int) -> None:
        self._api_quota = value

    # === API ===

    def questions_url(
        self,
        ids: str | None = None,
        page: int = 1,
        from_date: int = 0,
        to_date: int = 0,
        tag: str | None = None,
    ) -> str:
        """Build a questions URL carrying the configured API key."""
        return build_questions_url(
            ids, page, from_date, to_date, tag, api_key=self.api_key
        )

    def fetch(self, url: str, notifier: Notifier | None = None) -> dict[str, Any]:
        """Fetch ``url`` through the shared throttle."""
        return self._fetcher.fetch(url, notifier)

    # === Users ===

    @property
    def users(self) -> Mapping[int, User]:
        """Current user snapshot (read-only)."""
        return self._directory.snapshot

    @property
    def directory(self) -> UserDirectory:
        return self._directory

    @property
    def load_error(self) -> Exception | None:
        """Error recorded by the construction-time load, if any."""
        return self._load_result.error

    @property
    def store(self) -> UserStore:
        """The open store.

        Raises:
            StoreError: If the store never opened or was shut down
        """
        if self._store is None:
            raise StoreError("User store is not available")
        if self._store.closed:
            raise StoreError("User store is closed")
        return self._store

    def reload_users(self) -> Mapping[int, User]:
        """Replace the user snapshot from the store.

        Raises:
            StoreError: Unlike construction, failures reach the caller
        """
        with self._store_lock:
            return self._directory.reload(self.store)

    # === Lifecycle ===

    def shutdown(self) -> None:
        """Close the store and the HTTP client. Later calls do nothing."""
        with self._store_lock:
            if self._shut_down:
                return
            self._shut_down = True
            if self._store is not None:
                self._store.close()
            self._fetcher.close()
        logger.info("service_shutdown")


class ServiceHolder:
    """Construct-once factory for FinderService.

    The first ``initialize`` wins; later calls return the same instance
    and ignore their settings.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._instance: FinderService | None = None

    def initialize(self, settings: FinderSettings, **kwargs: Any) -> FinderService:
        """Create the service unless it already exists.

        Args:
            settings: Settings for the first construction
            **kwargs: Passed to FinderService (store, transport)
        """
        with self._lock:
            if self._instance is None:
                self._instance = FinderService(settings, **kwargs)
                logger.info(
                    "service_initialized",
                    throttle_ms=settings.api.throttle_ms,
                    users=len(self._instance.users),
                )
            else:
                logger.debug("service_already_initialized")
            return self._instance

    def get_instance(self) -> FinderService:
        """Return the service.

        Raises:
            UninitializedServiceError: If ``initialize`` was never called
        """
        instance = self._instance
        if instance is None:
            raise UninitializedServiceError(
                "You need to initialize the service before using it"
            )
        return instance

    @property
    def initialized(self) -> bool:
        return self._instance is not None

    def shutdown(self) -> None:
        """Shut the service down, if one was created."""
        with self._lock:
            if self._instance is not None:
                self._instance.shutdown()

    def reset(self) -> None:
        """Shut down and forget the instance (for testing)."""
        with self._lock:
            if self._instance is not None:
                self._instance.shutdown()
            self._instance = None


_default_holder = ServiceHolder()


def initialize(settings: FinderSettings, **kwargs: Any) -> FinderService:
    """Initialize the process-wide service (no-op if already initialized)."""
    return _default_holder.initialize(settings, **kwargs)


def get_instance() -> FinderService:
    """Get the process-wide service."""
    return _default_holder.get_instance()


def shutdown() -> None:
    """Shut the process-wide service down."""
    _default_holder.shutdown()


def default_holder() -> ServiceHolder:
    return _default_holder
