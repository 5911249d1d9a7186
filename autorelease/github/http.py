"""HTTP client abstraction for the GitHub REST API.

This module provides:
- HttpClient: Protocol for JSON-over-HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
- HttpError: Structured failure (status code plus GitHub validation issues)
"""

from __future__ import annotations

import json
import re
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from autorelease.core.result import Err, Ok, Result
from autorelease.core.structured import as_obj_list, as_str_dict, get_str

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "ValidationIssue",
]

_LINK_NEXT_RE = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One entry of the ``errors`` array GitHub returns with a 422."""

    resource: str | None
    code: str | None
    field: str | None = None


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: GitHub's ``message`` field, or the reason phrase
        issues: Validation issues from the response body, if any
    """

    url: str
    status: int
    message: str
    issues: tuple[ValidationIssue, ...] = ()

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations against a JSON API."""

    def get_json(self, url: str) -> Result[object, HttpError]:
        """GET url and parse the body as JSON."""
        ...

    def get_pages(self, url: str) -> Result[list[object], HttpError]:
        """GET url and every following ``rel="next"`` page.

        Returns:
            Ok with one parsed JSON payload per page, in order.
        """
        ...

    def send_json(
        self, method: str, url: str, payload: dict[str, Any]
    ) -> Result[object, HttpError]:
        """Send a JSON body with POST/PATCH and parse the JSON response."""
        ...

    def delete(self, url: str) -> Result[None, HttpError]:
        ...


def _parse_error_body(url: str, status: int, reason: str, body: bytes) -> HttpError:
    try:
        obj: object = json.loads(body.decode("utf-8")) if body else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        obj = None

    data = as_str_dict(obj)
    if data is None:
        return HttpError(url=url, status=status, message=reason)

    issues: list[ValidationIssue] = []
    for item in as_obj_list(data.get("errors")) or []:
        d = as_str_dict(item)
        if d is None:
            continue
        issues.append(
            ValidationIssue(
                resource=get_str(d, "resource"),
                code=get_str(d, "code"),
                field=get_str(d, "field"),
            )
        )

    return HttpError(
        url=url,
        status=status,
        message=get_str(data, "message") or reason,
        issues=tuple(issues),
    )


def next_page_url(link_header: str | None) -> str | None:
    """Extract the ``rel="next"`` target from a Link header."""
    if not link_header:
        return None
    m = _LINK_NEXT_RE.search(link_header)
    return m.group(1) if m else None


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - Bearer token auth and the GitHub JSON media type
    - Structured error bodies (message + validation issues)
    - Link-header pagination
    """

    def __init__(
        self,
        token: str,
        *,
        timeout: float = 30.0,
        user_agent: str = "auto-release",
    ) -> None:
        self.timeout = timeout
        self._headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._ssl_context = ssl.create_default_context()

    def _request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> Result[tuple[bytes, str | None], HttpError]:
        """Send a request and return (body, Link header)."""
        headers = dict(self._headers)
        data: bytes | None = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok((response.read(), response.headers.get("Link")))
        except urllib.error.HTTPError as e:
            body = e.read() if e.fp is not None else b""
            return Err(_parse_error_body(url, e.code, str(e.reason), body))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    @staticmethod
    def _decode(url: str, body: bytes) -> Result[object, HttpError]:
        try:
            obj: object = json.loads(body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        return Ok(obj)

    def get_json(self, url: str) -> Result[object, HttpError]:
        result = self._request("GET", url)
        if isinstance(result, Err):
            return result
        body, _ = result.value
        return self._decode(url, body)

    def get_pages(self, url: str) -> Result[list[object], HttpError]:
        pages: list[object] = []
        next_url: str | None = url
        while next_url is not None:
            result = self._request("GET", next_url)
            if isinstance(result, Err):
                return result
            body, link = result.value
            page = self._decode(next_url, body)
            if isinstance(page, Err):
                return page
            pages.append(page.value)
            next_url = next_page_url(link)
        return Ok(pages)

    def send_json(
        self, method: str, url: str, payload: dict[str, Any]
    ) -> Result[object, HttpError]:
        result = self._request(method, url, payload)
        if isinstance(result, Err):
            return result
        body, _ = result.value
        return self._decode(url, body)

    def delete(self, url: str) -> Result[None, HttpError]:
        result = self._request("DELETE", url)
        if isinstance(result, Err):
            return result
        return Ok(None)


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by (method, url). Unknown routes answer 404.

    Usage:
        client = MockHttpClient()
        client.set("GET", "https://api.github.com/repos/o/r/tags", [{"name": "v1.0.0"}])
        result = client.get_json("https://api.github.com/repos/o/r/tags")
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object] = {}
        self._pages: dict[str, list[object]] = {}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []

    def set(self, method: str, url: str, response: object) -> None:
        """Set the response (a JSON value or an HttpError) for a route."""
        self._responses[(method, url)] = response

    def set_pages(self, url: str, pages: list[object]) -> None:
        """Set a paginated GET response (one JSON value per page)."""
        self._pages[url] = pages

    def _answer(self, method: str, url: str) -> Result[object, HttpError]:
        key = (method, url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not Found"))
        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(self, url: str) -> Result[object, HttpError]:
        self.calls.append(("GET", url, None))
        return self._answer("GET", url)

    def get_pages(self, url: str) -> Result[list[object], HttpError]:
        self.calls.append(("GET", url, None))
        if url in self._pages:
            return Ok(list(self._pages[url]))
        result = self._answer("GET", url)
        if isinstance(result, Err):
            return result
        return Ok([result.value])

    def send_json(
        self, method: str, url: str, payload: dict[str, Any]
    ) -> Result[object, HttpError]:
        self.calls.append((method, url, payload))
        return self._answer(method, url)

    def delete(self, url: str) -> Result[None, HttpError]:
        self.calls.append(("DELETE", url, None))
        result = self._answer("DELETE", url)
        if isinstance(result, Err):
            return result
        return Ok(None)

    @property
    def methods(self) -> list[str]:
        return [c[0] for c in self.calls]
