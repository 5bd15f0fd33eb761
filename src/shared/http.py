"""Authenticated JSON client for the storefront's remote CRUD API.

Thin wrapper around a ``requests.Session``:

- URLs are resolved against ``STOREFRONT_API_BASE_URL`` (trailing slashes
  stripped); absolute URLs are used as-is.
- Every request carries a timeout (``STOREFRONT_API_TIMEOUT`` seconds, 15 by default).
- A ``token`` becomes an ``Authorization: Bearer`` header.
- Response bodies are parsed as JSON when possible, otherwise returned as text.
- Non-2xx statuses and transport failures raise ``ApiError``.
"""

import json
import os

import requests
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost/api"
DEFAULT_TIMEOUT = 15.0


class ApiError(Exception):
    """A failed API call. ``status`` is ``None`` when no response was received."""

    def __init__(self, message: str, status: int | None = None, data=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


def _error_message(data, response: requests.Response) -> str:
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        if message:
            return str(message)
    return response.reason or "Request failed"


class ApiClient:
    """JSON client bound to one base URL and one cookie jar."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        base_url = base_url or os.getenv("STOREFRONT_API_BASE_URL") or DEFAULT_BASE_URL
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.getenv("STOREFRONT_API_TIMEOUT", DEFAULT_TIMEOUT))
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{'' if path.startswith('/') else '/'}{path}"

    def request(
        self,
        method: str,
        path: str,
        body=None,
        params: dict | None = None,
        headers: dict | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        url = self.url_for(path)

        request_headers = {"Accept": "application/json"}
        request_headers.update(headers or {})
        if body is not None:
            request_headers["Content-Type"] = "application/json"
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        logger.debug("API request", method=method, url=url)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=json.dumps(body) if body is not None else None,
                headers=request_headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API request failed", method=method, url=url, error=str(exc))
            raise ApiError(str(exc) or "Request failed") from exc

        text = response.text
        try:
            data = json.loads(text) if text else None
        except ValueError:
            data = text

        if not response.ok:
            message = _error_message(data, response)
            logger.warning("API error response", method=method, url=url, status=response.status_code, error=message)
            raise ApiError(message, status=response.status_code, data=data)

        return data

    def get(self, path: str, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path: str, body=None, **kwargs):
        return self.request("POST", path, body=body, **kwargs)

    def put(self, path: str, body=None, **kwargs):
        return self.request("PUT", path, body=body, **kwargs)

    def patch(self, path: str, body=None, **kwargs):
        return self.request("PATCH", path, body=body, **kwargs)

    def delete(self, path: str, **kwargs):
        return self.request("DELETE", path, **kwargs)
