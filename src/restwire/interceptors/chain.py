r"""Ordered collection of interceptors invoked around each attempt."""

from __future__ import annotations

__all__ = ["InterceptorChain"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    import httpx

    from restwire.interceptors.base import Interceptor


class InterceptorChain:
    """Ordered, mutable sequence of interceptors.

    Interceptors run in registration order in every phase, and every
    interceptor always runs. The chain is not synchronized: it must be
    fully set up before requests are issued concurrently.

    Args:
        interceptors: Optional initial interceptors, in order.

    Example:
        ```pycon
        >>> from restwire.interceptors import Interceptor, InterceptorChain
        >>> chain = InterceptorChain()
        >>> interceptor = Interceptor()
        >>> chain.add(interceptor)
        >>> len(chain)
        1
        >>> chain.remove(interceptor)
        >>> len(chain)
        0

        ```
    """

    def __init__(self, interceptors: Iterable[Interceptor] = ()) -> None:
        self._interceptors: list[Interceptor] = list(interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)

    def __iter__(self) -> Iterator[Interceptor]:
        return iter(tuple(self._interceptors))

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._interceptors!r})"

    def add(self, interceptor: Interceptor) -> None:
        """Append an interceptor to the chain."""
        self._interceptors.append(interceptor)

    def remove(self, interceptor: Interceptor) -> None:
        """Remove an interceptor by identity.

        Removing an interceptor that is not in the chain does nothing.
        """
        for index, item in enumerate(self._interceptors):
            if item is interceptor:
                del self._interceptors[index]
                return

    def clear(self) -> None:
        """Remove every interceptor."""
        self._interceptors.clear()

    def run_on_request(self, request: httpx.Request) -> httpx.Request:
        """Pass a request through every interceptor in order.

        Args:
            request: The request built for the current attempt.

        Returns:
            The request returned by the last interceptor.
        """
        for interceptor in self:
            request = interceptor.on_request(request)
        return request

    def run_on_response(self, response: httpx.Response) -> httpx.Response:
        """Pass a response through every interceptor in order.

        Args:
            response: The response returned by the transport.

        Returns:
            The response returned by the last interceptor.
        """
        for interceptor in self:
            response = interceptor.on_response(response)
        return response

    def run_on_error(self, exc: Exception) -> None:
        """Notify every interceptor of an exception, in order.

        An exception raised by an interceptor propagates to the caller.

        Args:
            exc: The exception raised by the attempt.
        """
        for interceptor in self:
            interceptor.on_error(exc)
