"""Requests against the NCBI E-utilities endpoints."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from entrez import config
from entrez.models import UpstreamError

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 500, 502, 503, 504}

_pace_lock = threading.Lock()
_last_request = 0.0


def _pace() -> None:
    """Block until the configured minimum interval since the last request has passed."""
    global _last_request
    delay = config.get_request_delay()
    with _pace_lock:
        wait = _last_request + delay - time.monotonic()
        if wait > 0:
            time.sleep(wait)
        _last_request = time.monotonic()


@retry(
    retry=(
        retry_if_result(lambda r: r.status_code in RETRY_STATUSES)
        | retry_if_exception_type(httpx.TransportError)
    ),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    retry_error_callback=lambda state: state.outcome.result(),
)
def _get(url: str, **kwargs) -> httpx.Response:
    _pace()
    return httpx.get(url, **kwargs)


def _encode(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return value


def build_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop unset values, join list values with commas, add tool/email/api_key."""
    out: dict[str, Any] = {k: _encode(v) for k, v in params.items() if v is not None}
    out.setdefault("tool", config.get_tool())
    email = config.get_email()
    if email:
        out.setdefault("email", email)
    api_key = config.get_api_key()
    if api_key:
        out.setdefault("api_key", api_key)
    return out


def make_entrez_query(
    util: str,
    *,
    require_one_of: Iterable[str] = (),
    repeated: Iterable[str] = (),
    **params: Any,
) -> bytes:
    """Send a GET request to ``<util>.fcgi`` and return the response body.

    ``require_one_of`` names parameters of which at least one must be set.
    Parameters listed in ``repeated`` are sent once per value instead of
    being joined with commas.
    """
    required = list(require_one_of)
    if required and all(params.get(name) in (None, "", [], ()) for name in required):
        raise ValueError(f"Must specify at least one of: {', '.join(required)}")

    repeated_values = {name: params.pop(name) for name in repeated if params.get(name) is not None}
    query = build_params(params)
    for name, values in repeated_values.items():
        query[name] = [str(v) for v in values]

    url = f"{config.get_base_url()}/{util}.fcgi"
    logger.debug("GET %s %s", url, query)
    try:
        resp = _get(url, params=query, timeout=config.get_timeout())
    except httpx.TransportError as e:
        raise UpstreamError(f"{util} request failed: {e}") from e
    if resp.status_code >= 400:
        raise UpstreamError(f"{util} request failed with HTTP {resp.status_code}: {resp.url}")
    return resp.content
