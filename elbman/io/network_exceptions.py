"""
Retry helpers shared by the HTTP methods of :class:`elbman.api._api._Api`.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

import requests

RETRY_STATUS_CODES = {
    408,  # Request Timeout
    429,  # Too Many Requests
    500,
    502,
    503,
    504,
}

CONNECTION_ERROR = "Connection to the RightScale API failed"
HTTP_ERROR = "RightScale API returned an error"
RETRY_MESSAGE = "Retrying ({}/{})."


def is_retryable(exc: Exception, response: Optional[requests.Response] = None) -> bool:
    """
    Tell whether a failed request is worth another attempt.

    Connection problems and timeouts are always retried. HTTP errors are
    retried only for the status codes in :data:`RETRY_STATUS_CODES`.
    """
    if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True
    if isinstance(exc, requests.exceptions.HTTPError):
        if response is None:
            response = exc.response
        if response is None:
            return False
        return response.status_code in RETRY_STATUS_CODES
    return False


def process_requests_exception(
    external_logger: logging.Logger,
    exc: requests.RequestException,
    method: str,
    url: str,
    verbose: bool = True,
    swallow_exc: bool = False,
    sleep_sec: Optional[float] = None,
    response: Optional[requests.Response] = None,
    retry_info: Optional[Dict[str, int]] = None,
) -> None:
    """
    Log a failed request and either sleep before the next attempt or re-raise.

    :param external_logger: Logger of the API connection.
    :param exc: Exception raised by requests.
    :param method: API method name that was called.
    :param url: Full url of the request.
    :param verbose: Log the failure at WARNING instead of DEBUG.
    :param swallow_exc: Keep the exception for the caller's retry loop if it is retryable.
    :param sleep_sec: Seconds to wait before the next attempt.
    :param response: Response object, if the server answered.
    :param retry_info: ``{"retry_idx": n, "retry_limit": m}``.
    :raises requests.RequestException: when the error is not retryable or
        ``swallow_exc`` is False.
    """
    if isinstance(exc, requests.exceptions.HTTPError):
        message = HTTP_ERROR
    else:
        message = CONNECTION_ERROR

    extra = {"method": method, "url": url}
    if response is not None:
        extra["status_code"] = response.status_code
    if retry_info is not None:
        extra.update(retry_info)

    log = external_logger.warning if verbose else external_logger.debug
    log("%s: %s %s", message, exc, extra)

    if not swallow_exc or not is_retryable(exc, response):
        raise exc

    if retry_info is not None:
        external_logger.info(
            RETRY_MESSAGE.format(retry_info["retry_idx"], retry_info["retry_limit"])
        )
    if sleep_sec:
        time.sleep(sleep_sec)


def process_unhandled_request(external_logger: logging.Logger, exc: Exception) -> None:
    """Log an unexpected exception raised while talking to the API and re-raise it."""
    external_logger.error("Request failed with an unexpected error: %r", exc)
    raise exc
