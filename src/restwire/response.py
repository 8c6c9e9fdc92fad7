r"""Response envelope returned by every restwire request."""

from __future__ import annotations

__all__ = ["RestResponse"]

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import TYPE_CHECKING, Generic, TypeVar

from restwire.exceptions import HttpRequestError

if TYPE_CHECKING:
    from restwire.options import RequestOptions

T = TypeVar("T")

SERVER_ERROR_STATUS = 500
SERVER_ERROR_TEXT = "Internal Server Error"


@dataclass
class RestResponse(Generic[T]):
    """Decoded payload and metadata of one logical HTTP call.

    An envelope is created once per call, either from the response of
    the terminal attempt or from the last transport exception when all
    attempts failed. HTTP failures are reported with
    ``is_success=False`` instead of raising.

    Attributes:
        data: The decoded payload, or ``None`` if the call failed, the
            body was empty or the body could not be decoded.
        status: The HTTP status code. ``500`` when no response was
            received.
        status_text: The reason phrase of the response.
        headers: The response headers. A header sent several times keeps
            all its values in order.
        raw_content: The response body as text.
        is_success: ``True`` if the status code is in the 2xx range.
        error_message: A description of the failure, or ``None`` on
            success.
        exception: The transport exception of the last attempt, if the
            call ended with one.
        method: The HTTP method of the call.
        url: The resolved URL of the call.
        options: The dispatcher options that produced this envelope, if
            the call went through ``request``.

    Example:
        ```pycon
        >>> from restwire.response import RestResponse
        >>> response = RestResponse(data={"id": 1}, status=200, status_text="OK", is_success=True)
        >>> response.status_code
        <HTTPStatus.OK: 200>
        >>> response.raise_for_error() is response
        True

        ```
    """

    data: T | None = None
    status: int = 0
    status_text: str = ""
    headers: dict[str, list[str]] = field(default_factory=dict)
    raw_content: str = ""
    is_success: bool = False
    error_message: str | None = None
    exception: BaseException | None = None
    method: str = ""
    url: str = ""
    options: RequestOptions | None = None

    @property
    def status_code(self) -> HTTPStatus | int:
        """The status as an ``HTTPStatus`` member when the code is
        known, otherwise as a plain integer."""
        try:
            return HTTPStatus(self.status)
        except ValueError:
            return self.status

    def get_header(self, name: str) -> str | None:
        """Return the first value of a response header.

        Args:
            name: The header name, compared case-insensitively.

        Returns:
            The first value, or ``None`` if the header is absent.
        """
        lowered = name.lower()
        for key, values in self.headers.items():
            if key.lower() == lowered and values:
                return values[0]
        return None

    def raise_for_error(self) -> RestResponse[T]:
        """Raise an ``HttpRequestError`` if the call was not successful.

        Returns:
            The envelope itself, to allow chaining.

        Raises:
            HttpRequestError: If ``is_success`` is ``False``. The
                transport exception, if any, is chained as the cause.
        """
        if self.is_success:
            return self
        raise HttpRequestError(
            method=self.method,
            url=self.url,
            message=self.error_message or f"Request failed with status code {self.status}",
            status_code=self.status,
            response=self,
            cause=self.exception,
        )
