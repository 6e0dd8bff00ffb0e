# coding: utf-8
"""
Low level connection to the RightScale API 1.5.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Tuple, Union

import requests

from elbman.errors import AuthenticationError, ConfigurationError
from elbman.io.network_exceptions import (
    process_requests_exception,
    process_unhandled_request,
)

DEFAULT_API_VERSION = "1.5"

# refresh the access token this many seconds before it really expires
TOKEN_EXPIRY_MARGIN_SEC = 60


Params = Union[Dict[str, object], List[Tuple[str, object]]]


class _Api:
    """
    RightScale API connection which authenticates with an OAuth2 refresh token
    and retries failed requests.
    """

    def __init__(
        self,
        api_url: str,
        refresh_token: Optional[str] = None,
        oauth2_api_url: Optional[str] = None,
        api_version: Optional[str] = DEFAULT_API_VERSION,
        retry_count: Optional[int] = 10,
        retry_sleep_sec: Optional[float] = 1,
        logger: Optional[logging.Logger] = None,
    ):
        # authorization
        self._refresh_token = refresh_token
        self._api_url = api_url.rstrip("/")
        self._oauth2_api_url = oauth2_api_url or f"{self._api_url}/api/oauth2"
        self._api_version = api_version or DEFAULT_API_VERSION
        self._access_token: Optional[str] = None
        self._token_expires_at: float = 0.0

        # logger
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        # retry settings
        self._retry_count = retry_count if retry_count is not None else 10
        self._retry_sleep_sec = retry_sleep_sec if retry_sleep_sec is not None else 1

        self._session = requests.Session()

    # --- Authorization --------------------------------------------
    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def api_version(self) -> str:
        return self._api_version

    def _base_headers(self) -> Dict[str, str]:
        return {"X-API-Version": self._api_version}

    def _token_expired(self) -> bool:
        return self._access_token is None or time.time() >= self._token_expires_at

    def refresh_access_token(self) -> str:
        """
        Exchange the refresh token for a new access token.

        A 4xx answer means the refresh token itself is bad and is not retried.

        :return: Access token.
        :rtype: str
        :raises AuthenticationError: if the OAuth2 endpoint rejects the token.
        """
        if not self._refresh_token:
            raise ConfigurationError("You must specify a refresh token.")

        self.logger.debug(f"Refreshing access token at {self._oauth2_api_url}")
        try:
            response = self._request(
                "POST",
                self._oauth2_api_url,
                data={"grant_type": "refresh_token", "refresh_token": self._refresh_token},
                headers=self._base_headers(),
            )
        except requests.exceptions.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            if status_code is not None and 400 <= status_code < 500:
                raise AuthenticationError(
                    f"FAILED.  RightScale rejected the refresh token ({status_code})."
                ) from exc
            raise
        resp_json = response.json()
        self._access_token = resp_json["access_token"]
        expires_in = int(resp_json.get("expires_in", 7200))
        self._token_expires_at = time.time() + max(expires_in - TOKEN_EXPIRY_MARGIN_SEC, 0)
        return self._access_token

    def _auth_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        if self._token_expired():
            self.refresh_access_token()
        merged = {**self._base_headers(), "Authorization": f"Bearer {self._access_token}"}
        if headers is not None:
            merged.update(headers)
        return merged

    # --- HTTP methods ---------------------------------------------
    def get(
        self,
        method: str,
        params: Optional[Params] = None,
        retries: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Performs GET request to server with given parameters.

        :param method: API path, e.g. ``/api/server_arrays``.
        :type method: str
        :param params: Query parameters.
        :type params: dict or list of tuples, optional
        :param retries: The number of attempts to connect to the server.
        :type retries: int, optional
        :return: Response object
        :rtype: :class:`Response<Response>`
        """
        url = self._prepare_url(method)
        self.logger.debug(f"GET {url}")
        return self._request_with_retries(
            "GET", method, url, retries=retries, params=params, headers=headers
        )

    def post(
        self,
        method: str,
        data: Optional[Params] = None,
        retries: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Performs POST request to server with given form parameters.

        RightScale API 1.5 expects form encoded bodies with bracketed keys,
        e.g. ``inputs[ELB_NAME]``.

        :param method: API path.
        :type method: str
        :param data: Form parameters.
        :type data: dict or list of tuples, optional
        :param retries: The number of attempts to connect to the server.
        :type retries: int, optional
        :return: Response object
        :rtype: :class:`Response<Response>`
        """
        url = self._prepare_url(method)
        self.logger.debug(f"POST {url}")
        return self._request_with_retries(
            "POST", method, url, retries=retries, data=data, headers=headers
        )

    def _request_with_retries(
        self,
        http_method: str,
        method: str,
        url: str,
        retries: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> requests.Response:
        if retries is None:
            retries = self._retry_count

        reauthenticated = False
        for retry_idx in range(retries):
            response = None
            try:
                response = self._request(
                    http_method, url, headers=self._auth_headers(headers), **kwargs
                )
                return response
            except requests.RequestException as exc:
                response = getattr(exc, "response", None)
                if (
                    isinstance(exc, requests.exceptions.HTTPError)
                    and response is not None
                    and response.status_code == 401
                    and not reauthenticated
                ):
                    # access token revoked or expired early, refresh once per request
                    self._access_token = None
                    reauthenticated = True
                    self.logger.info("Access token rejected, refreshing.")
                    if retry_idx + 1 < retries:
                        continue
                process_requests_exception(
                    self.logger,
                    exc,
                    method,
                    url,
                    verbose=True,
                    swallow_exc=True,
                    sleep_sec=min(self._retry_sleep_sec * (2**retry_idx), 60),
                    response=response,
                    retry_info={"retry_idx": retry_idx + 1, "retry_limit": retries},
                )
            except Exception as exc:
                process_unhandled_request(self.logger, exc)
        raise requests.exceptions.RetryError("Retry limit exceeded ({!r})".format(url))

    def _request(self, http_method: str, url: str, **kwargs) -> requests.Response:
        response = self._session.request(http_method, url, **kwargs)
        if not response.ok:
            _Api._raise_for_status(response)
        return response

    def _prepare_url(self, method: str) -> str:
        """
        Prepares the API endpoint URL. Absolute urls are passed through.
        """
        if method.startswith("http://") or method.startswith("https://"):
            return method
        if not method.startswith("/"):
            method = "/api/" + method
        return self._api_url + method

    @staticmethod
    def _raise_for_status(response: requests.Response):
        """
        Raise error and show message with error code if given response can not connect to server.
        :param response: Request class object
        """
        http_error_msg = ""
        if isinstance(response.reason, bytes):
            try:
                reason = response.reason.decode("utf-8")
            except UnicodeDecodeError:
                reason = response.reason.decode("iso-8859-1")
        else:
            reason = response.reason

        if 400 <= response.status_code < 500:
            http_error_msg = "%s Client Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                response.content.decode("utf-8", errors="replace"),
            )

        elif 500 <= response.status_code < 600:
            http_error_msg = "%s Server Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                response.content.decode("utf-8", errors="replace"),
            )

        if http_error_msg:
            raise requests.exceptions.HTTPError(http_error_msg, response=response)

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
