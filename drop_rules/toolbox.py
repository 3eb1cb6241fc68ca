"""The restricted tool belt handed to rules: JSON fetches and URL helpers."""

import html
import json
import logging
import time
from typing import Any, List, Optional

import httpx

from . import jsonpath
from .config import FetchConfig
from .errors import DecodeError, FetchError
from .urls import ParsedURL, parse_url, unescape_url

logger = logging.getLogger("drop_rules")


class JSONNode:
    """A decoded JSON document that can be queried with JSONPath expressions."""

    def __init__(self, value: Any):
        self.value = value

    def get(self, path: str) -> Any:
        """Return the first value matching `path`, or None."""
        return jsonpath.first(self.value, path)

    def get_all(self, path: str) -> List[Any]:
        return jsonpath.find(self.value, path)

    def __repr__(self) -> str:
        return f"JSONNode({type(self.value).__name__})"


class Toolbox:
    """Per-invocation toolbox.

    Fetches go through a shared HTTP client but the fetch counter and the
    wall-clock deadline belong to one invocation only.
    """

    def __init__(self, client: httpx.Client, config: Optional[FetchConfig] = None, rule_name: str = ""):
        self.client = client
        self.config = config or FetchConfig()
        self.rule_name = rule_name
        self.fetches = 0
        self._deadline = time.monotonic() + self.config.invocation_timeout

    def remaining(self) -> float:
        return max(0.0, self._deadline - time.monotonic())

    def fetch_json(self, url: str) -> JSONNode:
        """GET `url` and decode the response body as JSON."""
        if self.fetches >= self.config.max_fetches:
            raise FetchError(url, f"fetch limit reached ({self.config.max_fetches})")
        remaining = self.remaining()
        if remaining <= 0:
            raise FetchError(url, "invocation time budget exhausted")

        self.fetches += 1
        logger.debug(f"[{self.rule_name}] Fetch {self.fetches}/{self.config.max_fetches}: {url}")

        body = self._get(url, timeout=min(self.config.timeout, remaining))
        try:
            return JSONNode(json.loads(body.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(url, str(e)) from e

    def _get(self, url: str, timeout: float) -> bytes:
        try:
            with self.client.stream("GET", url, timeout=timeout) as resp:
                if not resp.is_success:
                    raise FetchError(url, f"invalid status code {resp.status_code}", status=resp.status_code)

                content_length = resp.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > self.config.max_body_size:
                    raise FetchError(url, f"response too large: {content_length} bytes", status=resp.status_code)

                chunks = []
                size = 0
                for chunk in resp.iter_bytes():
                    # httpx timeouts apply per read, a trickling body must still fit the budget
                    if self.remaining() <= 0:
                        raise FetchError(url, "invocation time budget exhausted", status=resp.status_code)
                    size += len(chunk)
                    if size > self.config.max_body_size:
                        raise FetchError(url, f"response exceeded {self.config.max_body_size} bytes",
                                         status=resp.status_code)
                    chunks.append(chunk)
                return b"".join(chunks)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out: {e}") from e
        except (httpx.TransportError, httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

    @staticmethod
    def parse_url(src: str) -> ParsedURL:
        return parse_url(src)

    @staticmethod
    def unescape_url(src: str) -> str:
        return unescape_url(src)

    @staticmethod
    def unescape(src: str) -> str:
        return html.unescape(src)
