"""Exception hierarchy for the Discogs client."""

from __future__ import annotations

from discogs.sdk.models import RateInfo


class DiscogsError(Exception):
    """Base exception for every failure raised by the client."""


class MalformedTarget(DiscogsError, ValueError):
    """A request path or cursor URL could not be resolved."""

    def __init__(self, target: str, reason: str = "invalid URL") -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"malformed target {target!r}: {reason}")


class RequestOptionFailed(DiscogsError):
    """A request hook raised; carries the hook's position and its error."""

    def __init__(self, index: int, cause: BaseException) -> None:
        self.index = index
        self.cause = cause
        super().__init__(f"error with request option {index}: {cause}")


class TransportFailure(DiscogsError):
    """Any ``httpx.RequestError`` (connect, timeout, body decoding). Chained to it."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"transport failure: {cause!r}")


class RateLimitWaitCanceled(DiscogsError):
    """The limiter wait was canceled or timed out; nothing was sent."""


class RequestCanceled(DiscogsError):
    """The in-flight request was abandoned because its cancel signal fired."""


class NilClient(DiscogsError, ValueError):
    def __init__(self) -> None:
        super().__init__("provided a nil client to init pager")


class DecodeFailure(DiscogsError):
    """The response body does not match the expected shape."""

    def __init__(self, model: str, cause: Exception) -> None:
        self.model = model
        self.cause = cause
        super().__init__(f"could not decode response body as {model}: {cause}")


class ConcurrentPagerUse(DiscogsError, RuntimeError):
    def __init__(self) -> None:
        super().__init__("pager is already fetching a page; it is not safe for concurrent use")


class IdentityCheckFailed(DiscogsError):
    """The identity call made while constructing an authenticated client failed."""


class UnexpectedStatus(DiscogsError):
    """Raised by endpoints when the response status is not one they expect."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        expected: tuple[int, ...] = (),
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.expected = expected
        super().__init__(f"{status_code}: {detail}")


class ValidationError(UnexpectedStatus):
    """Raised on 400 or 422 responses."""


class AuthenticationError(UnexpectedStatus):
    """Raised on 401 or 403 responses."""


class NotFoundError(UnexpectedStatus):
    """Raised on 404 responses."""


class RateLimitError(UnexpectedStatus):
    """Raised on 429 responses."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        expected: tuple[int, ...] = (),
        rate_info: RateInfo | None = None,
    ) -> None:
        super().__init__(status_code, detail, expected)
        self.rate_info = rate_info


class PageDone(Exception):
    """End of a page chain. Deliberately not a :class:`DiscogsError`."""

    def __init__(self) -> None:
        super().__init__("no more pages to iterate")


# Maps HTTP status codes to exception classes.
_STATUS_MAP: dict[int, type[UnexpectedStatus]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
}


def build_status_error(
    status_code: int,
    detail: str,
    expected: tuple[int, ...] = (),
    rate_info: RateInfo | None = None,
) -> UnexpectedStatus:
    """Construct the appropriate exception for *status_code*."""
    exc_cls = _STATUS_MAP.get(status_code, UnexpectedStatus)
    if exc_cls is RateLimitError:
        return RateLimitError(status_code, detail, expected, rate_info)
    return exc_cls(status_code, detail, expected)
