import asyncio
import json
from typing import Any, Optional

import urllib3
from urllib3.util.retry import Retry
from urllib3 import exceptions as urllib3_exc

from .errors import FetchError
from .types import FetchRequest, FetchResult


class HttpClient:
    def __init__(
        self,
        user_agent: str,
        request_timeout: Optional[float] = None,
        max_connections: int = 4,
        pool: Any = None,
    ):
        self.user_agent = user_agent
        pool_kw: dict = {}
        if request_timeout is not None:
            pool_kw["timeout"] = urllib3.Timeout(connect=5.0, read=request_timeout)
        self.http = pool or urllib3.PoolManager(
            maxsize=max_connections,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
            # redirects are followed; failures are never retried
            retries=Retry(total=None, connect=0, read=0, status=0, other=0, redirect=5),
            **pool_kw,
        )

    def _request_bytes(self, url: str) -> tuple[int, bytes]:
        try:
            response = self.http.request("GET", url, preload_content=True)
        except urllib3_exc.HTTPError as exc:
            raise FetchError(str(exc)) from exc
        return response.status, response.data or b""

    @staticmethod
    def _extract_payload(url: str, body: bytes) -> str:
        try:
            doc = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise FetchError(f"Invalid JSON from {url}: {exc}") from exc
        message = doc.get("message") if isinstance(doc, dict) else None
        if not isinstance(message, str):
            raise FetchError(f"No 'message' string in response from {url}")
        return message

    def fetch_blocking(self, request: FetchRequest) -> FetchResult:
        status, body = self._request_bytes(request.url)
        if not 200 <= status < 300:
            raise FetchError(f"HTTP {status} for {request.url}")
        payload = self._extract_payload(request.url, body)
        return FetchResult(status=status, payload=payload, size_bytes=len(body))

    async def fetch(self, request: FetchRequest) -> FetchResult:
        return await asyncio.to_thread(self.fetch_blocking, request)

    def close(self) -> None:
        clear = getattr(self.http, "clear", None)
        if clear is not None:
            clear()
