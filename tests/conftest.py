import json
import logging
from urllib.parse import unquote

import httpx
import pytest

from drop_rules.config import AppConfig
from drop_rules.engine import RuleEngine


class FakeWeb:
    """Serves canned responses by URL and records requested URLs."""

    def __init__(self):
        self.routes = {}
        self.requested = []

    def add(self, url, body=None, status=200, raw=None):
        self.routes[unquote(url)] = (status, raw if raw is not None else json.dumps(body).encode())

    def add_error(self, url, exc_cls):
        self.routes[unquote(url)] = exc_cls

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        route = self.routes.get(unquote(url))
        if route is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(route, type):
            raise route("boom", request=request)
        status, content = route
        return httpx.Response(status, content=content, headers={"content-type": "application/json"})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def web():
    return FakeWeb()


@pytest.fixture
def engine(web):
    eng = RuleEngine(AppConfig(), client=web.client())
    yield eng
    eng.close()


@pytest.fixture(autouse=True)
def _debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="drop_rules")
