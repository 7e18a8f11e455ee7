"""Stack Exchange API access: URL building, throttling, fetching."""

from socvfinder.api.fetcher import ThrottledFetcher
from socvfinder.api.throttle import Throttle
from socvfinder.api.urls import (
    API_FILTER,
    API_SITE,
    API_URL,
    PAGE_SIZE,
    build_questions_url,
    redact_key,
)

__all__ = [
    "API_FILTER",
    "API_SITE",
    "API_URL",
    "PAGE_SIZE",
    "Throttle",
    "ThrottledFetcher",
    "build_questions_url",
    "redact_key",
]
