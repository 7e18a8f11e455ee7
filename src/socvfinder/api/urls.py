"""URL construction for the Stack Exchange questions endpoint.

Pure functions: no I/O, no shared state. Parameter order is fixed so the
same inputs always produce the same string.
"""

from urllib.parse import quote_plus

from socvfinder.contracts.errors import EncodingError

API_URL = "https://api.stackexchange.com/2.2/"
API_FILTER = "!-MObZ6A82KZGZ3WvblLvUKz1bWU5_K147"
API_SITE = "stackoverflow"
PAGE_SIZE = 100


def build_questions_url(
    ids: str | None = None,
    page: int = 1,
    from_date: int = 0,
    to_date: int = 0,
    tag: str | None = None,
    *,
    api_key: str | None = None,
) -> str:
    """Build a questions-listing URL.

    Args:
        ids: Semicolon-joined question ids ("1;2;3"), None for no filter
        page: Page to view (1-based)
        from_date: Unix timestamp lower bound, 0 to not filter
        to_date: Unix timestamp upper bound, 0 to not filter
        tag: Tag to filter on, None to not filter
        api_key: App key appended last when configured

    Returns:
        The request URL

    Raises:
        EncodingError: If ``tag`` or ``api_key`` cannot be encoded as UTF-8
    """
    path = f"{API_URL}questions"
    if ids is not None:
        path += f"/{ids}"

    params = [f"page={page}", f"pagesize={PAGE_SIZE}"]
    if from_date > 0:
        params.append(f"fromdate={from_date}")
    if to_date > 0:
        params.append(f"todate={to_date}")
    params.append("order=desc&sort=creation")
    if tag is not None:
        params.append(f"tagged={_encode(tag)}")
    params.append(f"site={API_SITE}&filter={API_FILTER}")
    if api_key is not None:
        params.append(f"key={_encode(api_key)}")

    return f"{path}?{'&'.join(params)}"


def redact_key(url: str) -> str:
    """Mask the ``key`` parameter so URLs can be logged."""
    head, sep, query = url.partition("?")
    if not sep:
        return url
    parts = [
        "key=***" if part.startswith("key=") else part for part in query.split("&")
    ]
    return f"{head}?{'&'.join(parts)}"


def _encode(value: str) -> str:
    # Form encoding: space becomes "+", everything non-unreserved is %XX
    try:
        return quote_plus(value, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot percent-encode {value!r} as UTF-8") from e
