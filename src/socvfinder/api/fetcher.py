"""Throttled fetcher for the Stack Exchange API.

Every call goes through one global critical section: throttle wait,
request, decompression and JSON parsing all happen while the slot is held.
Responses are never cached.
"""

from __future__ import annotations

import gzip
import json
import zlib
from typing import TYPE_CHECKING, Any, Self

import httpx

from socvfinder.api.throttle import Throttle
from socvfinder.api.urls import redact_key
from socvfinder.contracts.errors import DecodeError, TransportError
from socvfinder.core.logging import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from socvfinder.contracts.protocols import Notifier

logger = get_logger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"


class ThrottledFetcher:
    """Fetch API documents one at a time, spaced by the throttle.

    Example:
        with ThrottledFetcher(Throttle(interval_ms=1000)) as fetcher:
            doc = fetcher.fetch(build_questions_url(page=1))
            quota = doc["quota_remaining"]
    """

    def __init__(
        self,
        throttle: Throttle,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            throttle: Spacing gate shared by all callers of this fetcher
            timeout: Per-call network timeout in seconds (None = no timeout)
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._throttle = throttle
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )

    @property
    def throttle(self) -> Throttle:
        return self._throttle

    def fetch(self, url: str, notifier: Notifier | None = None) -> dict[str, Any]:
        """Get the document at ``url`` as a parsed JSON object.

        Args:
            url: Fully built API URL
            notifier: Told about throttle waits; may be None

        Returns:
            The parsed JSON object

        Raises:
            TransportError: Network failure or non-2xx status
            DecodeError: Body is not gzip/UTF-8/JSON object
        """
        safe_url = redact_key(url)
        with self._throttle.slot(notifier):
            logger.info("api_call", url=safe_url)
            status_code, raw, encoding = self._get_raw(url, safe_url)
            if not 200 <= status_code < 300:
                raise _status_error(status_code, raw, encoding, safe_url)
            return _parse(raw, encoding, safe_url)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _get_raw(self, url: str, safe_url: str) -> tuple[int, bytes, str]:
        """Perform the GET and return (status, undecoded body, content-encoding)."""
        try:
            with self._client.stream(
                "GET", url, headers={"Accept-Encoding": "gzip"}
            ) as response:
                raw = b"".join(response.iter_raw())
                encoding = response.headers.get("Content-Encoding", "").lower()
                return response.status_code, raw, encoding
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {safe_url} failed: {e}", url=safe_url
            ) from e


def _status_error(
    status_code: int, raw: bytes, encoding: str, safe_url: str
) -> TransportError:
    # The API explains errors in a JSON body (error_id, error_message)
    try:
        body: dict[str, Any] | None = _parse(raw, encoding, safe_url)
    except DecodeError:
        body = None
    message = f"API answered {status_code} for {safe_url}"
    if body is not None and "error_message" in body:
        message += f": {body['error_message']}"
    return TransportError(message, url=safe_url, status_code=status_code, body=body)


def _parse(raw: bytes, encoding: str, safe_url: str) -> dict[str, Any]:
    """Decompress, decode and parse a response body.

    Nothing partial escapes: any failure raises DecodeError.
    """
    try:
        if "gzip" in encoding or raw.startswith(_GZIP_MAGIC):
            raw = gzip.decompress(raw)
        text = raw.decode("utf-8")
        document = json.loads(text)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError(f"Malformed gzip body from {safe_url}") from e
    except UnicodeDecodeError as e:
        raise DecodeError(f"Body from {safe_url} is not UTF-8") from e
    except json.JSONDecodeError as e:
        raise DecodeError(f"Body from {safe_url} is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(
            f"Expected a JSON object from {safe_url}, got {type(document).__name__}"
        )
    logger.debug("api_response", url=safe_url, body=text)
    return document
