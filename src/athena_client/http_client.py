"""
Async transport for the athenahealth REST API.

- Expands `/resource/{id}` style templates under `/{version}/{practiceid}`
  (every substituted value percent-encoded)
- GET/DELETE queries as URL query strings, POST/PUT/DELETE bodies as
  application/x-www-form-urlencoded
- Awaits the auth hook before every dispatch
- Classifies failures: httpx errors -> ApiTransportError, non-2xx ->
  ApiStatusError (body kept verbatim), unparseable 2xx JSON -> ApiDecodeError

No retries here; wrap calls with `retry.call_with_retry` for that.
"""
from __future__ import annotations
import string
import sys
import uuid
from typing import Any, Dict, Mapping, NamedTuple, Optional
from urllib.parse import quote, urlencode

import httpx

from .auth import AuthHook
from .errors import ApiDecodeError, ApiStatusError, ApiTransportError
from .pagination import RawPagination, raw_pagination
from .params import Pairs
from .utils import snippet

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
BODY_METHODS = {"POST", "PUT", "DELETE"}
QUERY_METHODS = {"GET", "DELETE"}

_formatter = string.Formatter()


class TransportResult(NamedTuple):
    payload: Any                # decoded JSON, None for an empty body
    pagination: RawPagination   # raw next/previous/totalcount, if any
    status: int


def expand_path(template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Substitute `{name}` placeholders with percent-encoded values.
    A missing or empty value is a programming error and raises ValueError.
    """
    path_params = path_params or {}
    encoded: Dict[str, str] = {}
    for _, name, _, _ in _formatter.parse(template):
        if name is None:
            continue
        if name not in path_params or path_params[name] is None or str(path_params[name]) == "":
            raise ValueError(f"missing path parameter {name!r} for {template!r}")
        encoded[name] = quote(str(path_params[name]), safe="")
    return template.format(**encoded)


class HttpClient:
    """
    Reusable async HTTP client bound to one practice:
      - base_url + /{api_version}/{practice_id}
      - httpx timeouts
      - pluggable auth hook
      - X-Request-Id on every request
    Holds only construction-time configuration, so one instance can serve
    concurrent calls.
    """

    def __init__(
        self,
        base_url: str,
        practice_id: str,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
        *,
        api_version: str = "v1",
        auth: Optional[AuthHook] = None,
        default_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        verbose: bool = False,
    ):
        if not practice_id:
            raise ValueError("practice_id must be non-empty")
        self.base_url = base_url.rstrip("/")
        self.practice_id = practice_id
        self.base_path = f"/{quote(api_version, safe='')}/{quote(practice_id, safe='')}"
        self.timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=read_timeout,
            pool=read_timeout,
        )
        self.auth = auth
        self.default_headers = {"Accept": "application/json", **(default_headers or {})}
        self.transport = transport
        self.verbose = verbose
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.default_headers,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def url_path(self, template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
        return self.base_path + expand_path(template, path_params)

    async def request(
        self,
        method: str,
        path: str,
        path_params: Optional[Mapping[str, Any]] = None,
        *,
        query: Optional[Pairs] = None,
        form: Optional[Pairs] = None,
        req_id: Optional[str] = None,
    ) -> TransportResult:
        """
        Dispatch one request and decode the JSON body of a 2xx response.
        `form=None` sends no body; `form=[]` sends an empty form.
        """
        assert self._client is not None, "HttpClient must be used inside 'async with'"
        method = method.upper()
        if query and method not in QUERY_METHODS:
            raise ValueError(f"{method} does not take a query string")
        if form is not None and method not in BODY_METHODS:
            raise ValueError(f"{method} does not take a form body")

        url = self.url_path(path, path_params)
        req_id = req_id or str(uuid.uuid4())
        headers = {"X-Request-Id": req_id}
        content = None
        if form is not None:
            headers["Content-Type"] = FORM_CONTENT_TYPE
            content = urlencode(form)
        if self.auth is not None:
            await self.auth.apply(headers)

        try:
            resp = await self._client.request(
                method,
                url,
                params=query or None,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise ApiTransportError(f"{method} {self.base_url}{url}: {type(e).__name__}: {e}", cause=e) from e

        status = resp.status_code
        if self.verbose:
            print(f"[req#{req_id}] {method} {self.base_url}{url} -> {status}", file=sys.stderr)

        # Error bodies are structured but left undecoded here
        if not (200 <= status < 300):
            raise ApiStatusError(status, resp.text)

        if not resp.content.strip():
            return TransportResult(None, RawPagination(), status)
        try:
            payload = resp.json()
        except ValueError as e:
            raise ApiDecodeError("response is not valid JSON", snippet(resp.text), cause=e) from e
        return TransportResult(payload, raw_pagination(payload), status)

    async def get(self, path: str, path_params: Optional[Mapping[str, Any]] = None,
                  query: Optional[Pairs] = None) -> TransportResult:
        return await self.request("GET", path, path_params, query=query)

    async def post_form(self, path: str, path_params: Optional[Mapping[str, Any]] = None,
                        form: Optional[Pairs] = None) -> TransportResult:
        return await self.request("POST", path, path_params, form=form)

    async def put_form(self, path: str, path_params: Optional[Mapping[str, Any]] = None,
                       form: Optional[Pairs] = None) -> TransportResult:
        return await self.request("PUT", path, path_params, form=form)

    async def delete_form(self, path: str, path_params: Optional[Mapping[str, Any]] = None,
                          form: Optional[Pairs] = None) -> TransportResult:
        return await self.request("DELETE", path, path_params, form=form)
