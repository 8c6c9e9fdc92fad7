r"""Interceptors observing and mutating requests, responses and
errors."""

from __future__ import annotations

__all__ = [
    "CORRELATION_ID_HEADER",
    "CorrelationIdInterceptor",
    "Interceptor",
    "InterceptorChain",
    "LoggingInterceptor",
]

from restwire.interceptors.base import Interceptor
from restwire.interceptors.chain import InterceptorChain
from restwire.interceptors.builtin import (
    CORRELATION_ID_HEADER,
    CorrelationIdInterceptor,
    LoggingInterceptor,
)
