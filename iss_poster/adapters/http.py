"""Shared aiohttp session helpers."""

from __future__ import annotations

import logging

import aiohttp

LOGGER = logging.getLogger(__name__)


def create_session(*, ignore_tls: bool = False) -> aiohttp.ClientSession:
    """Create the session shared by every stage of one run.

    Per-request timeouts are applied by the stage clients, so the session
    itself carries no total timeout. ``ignore_tls`` disables certificate
    validation for networks behind self-signed proxies.
    """

    if ignore_tls:
        LOGGER.warning("TLS certificate validation is disabled")
        connector = aiohttp.TCPConnector(ssl=False)
    else:
        connector = aiohttp.TCPConnector()
    return aiohttp.ClientSession(
        connector=connector, timeout=aiohttp.ClientTimeout(total=None)
    )


def describe_error(exc: BaseException) -> str:
    """Return a readable cause for exceptions whose str() may be empty."""
    text = str(exc).strip()
    return text or type(exc).__name__


def is_success(status: int) -> bool:
    return 200 <= status < 300
