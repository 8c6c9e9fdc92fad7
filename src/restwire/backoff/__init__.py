r"""Backoff strategies for delays between retry attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ConstantBackoff", "ExponentialBackoff"]

from restwire.backoff.base import BaseBackoffStrategy
from restwire.backoff.constant import ConstantBackoff
from restwire.backoff.exponential import ExponentialBackoff
