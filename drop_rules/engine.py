"""Rule engine: dispatch a drop to its site rule and run it, best-effort."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import httpx

from .config import AppConfig
from .context import ExecutionContext, RuleOutcome
from .models import Drop
from .registry import RuleRegistry
from .toolbox import Toolbox

logger = logging.getLogger("drop_rules")


class RuleEngine:
    def __init__(self, config: Optional[AppConfig] = None, registry: Optional[RuleRegistry] = None,
                 client: Optional[httpx.Client] = None):
        self.config = config or AppConfig()
        self.registry = registry if registry is not None else RuleRegistry.default(self.config)
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                fetch = self.config.fetch
                self._client = httpx.Client(
                    timeout=httpx.Timeout(fetch.timeout),
                    follow_redirects=True,
                    headers={
                        "User-Agent": fetch.user_agent,
                        "Accept": "application/json,text/html;q=0.9,*/*;q=0.8",
                        "Accept-Language": fetch.accept_language,
                    },
                )
            return self._client

    def close(self):
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "RuleEngine":
        return self

    def __exit__(self, *exc):
        self.close()

    def run(self, drop: Drop) -> RuleOutcome:
        """Run the rule registered for the drop's domain, if any."""
        rule = self.registry.dispatch(drop.domain)
        if rule is None:
            logger.debug(f"No rule for {drop.domain!r}")
            return RuleOutcome(drop=drop)

        toolbox = Toolbox(self.client, self.config.fetch, rule.name)
        return ExecutionContext(drop, rule, toolbox).run()

    def apply(self, drop: Drop) -> Drop:
        return self.run(drop).drop

    def run_many(self, drops: List[Drop], max_workers: Optional[int] = None) -> List[RuleOutcome]:
        """Run independent drops in parallel. Outcomes keep the input order."""
        if not drops:
            return []
        workers = max(1, min(max_workers or self.config.max_workers, len(drops)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.run, drops))

    def apply_many(self, drops: List[Drop], max_workers: Optional[int] = None) -> List[Drop]:
        return [outcome.drop for outcome in self.run_many(drops, max_workers)]


_default_engine: Optional[RuleEngine] = None
_default_lock = threading.Lock()


def default_engine() -> RuleEngine:
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = RuleEngine()
        return _default_engine


def apply_rules(drop: Drop) -> Drop:
    """Enrich a drop in place with the default engine and return it."""
    return default_engine().apply(drop)
