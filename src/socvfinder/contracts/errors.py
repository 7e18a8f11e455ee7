"""Error taxonomy for the finder core.

Every failure that leaves the core is one of these types. The underlying
library exception (httpx, SQLAlchemy, gzip, json) is always chained as
``__cause__``.
"""


class SOCVFinderError(Exception):
    """Base class for all finder errors."""


class UninitializedServiceError(SOCVFinderError):
    """The shared service was requested before it was initialized."""


class StoreError(SOCVFinderError):
    """The backing user store failed or has already been closed."""


class TransportError(SOCVFinderError):
    """The network call failed or the API answered with a non-2xx status.

    Attributes:
        url: URL that was requested (API key redacted)
        status_code: HTTP status when a response was received, else None
        body: Parsed error document when the API sent one, else None
    """

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        body: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class DecodeError(SOCVFinderError):
    """The response body was not a well-formed gzip/UTF-8/JSON document."""


class EncodingError(SOCVFinderError):
    """A query value could not be percent-encoded as UTF-8."""
