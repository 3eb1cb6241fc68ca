"""Execution context: the capability surface a rule runs against."""

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Union

from .errors import RoutineError
from .models import DOCUMENT_TYPES, Drop, DropMeta
from .toolbox import Toolbox
from .urls import ParsedURL, parse_url

if TYPE_CHECKING:
    from .rules.base import BaseRule

logger = logging.getLogger("drop_rules")


class DropView:
    """Read/write access to a drop, as seen by a rule.

    Every read returns a copy; writes go through the setters only.
    """

    def __init__(self, drop: Drop, rule_name: str = ""):
        self._drop = drop
        self._rule_name = rule_name

    @property
    def url(self) -> ParsedURL:
        return parse_url(self._drop.url)

    @property
    def domain(self) -> str:
        return self._drop.domain

    @property
    def meta(self) -> DropMeta:
        return self._drop.effective_meta()

    def _ignored(self, setter: str):
        logger.debug(f"[{self._rule_name}] {setter}(None) ignored")

    def set_title(self, value: Optional[str]):
        if value is None:
            self._ignored("set_title")
            return
        self._drop.title = str(value)

    def set_description(self, value: Optional[str]):
        if value is None:
            self._ignored("set_description")
            return
        self._drop.description = str(value)

    def set_authors(self, *values: Union[str, Sequence[str], None]):
        authors = []
        for value in values:
            if value is None:
                continue
            if isinstance(value, str):
                authors.append(value)
            else:
                authors.extend(str(v) for v in value if v is not None)
        if not authors and any(v is None for v in values):
            self._ignored("set_authors")
            return
        self._drop.authors = authors

    def set_document_type(self, value: Optional[str]):
        if value is None:
            self._ignored("set_document_type")
            return
        if value not in DOCUMENT_TYPES:
            raise ValueError(f"unknown document type {value!r}")
        self._drop.document_type = value

    def set_meta(self, name: str, value: Optional[str]):
        if not name:
            raise ValueError("meta name cannot be empty")
        if value is None:
            self._ignored("set_meta")
            return
        self._drop.extra_meta[name] = [str(value)]


class Console:
    """Logging for rule bodies.

    Dict arguments become `key=value` fields, anything else is part of the
    message.
    """

    def __init__(self, rule_name: str):
        self.rule_name = rule_name

    def _emit(self, level: int, args):
        fields = {}
        words = []
        for arg in args:
            if isinstance(arg, dict):
                fields.update(arg)
            else:
                words.append(str(arg))
        message = " ".join(words)
        if fields:
            message += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        logger.log(level, f"[{self.rule_name}] {message.strip()}")

    def log(self, *args):
        self._emit(logging.INFO, args)

    def debug(self, *args):
        self._emit(logging.DEBUG, args)

    def error(self, *args):
        self._emit(logging.ERROR, args)


@dataclass
class RuleOutcome:
    drop: Drop
    rule: Optional[str] = None
    status: str = "skipped"  # skipped, applied, failed
    error: Optional[RoutineError] = None
    fetches: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> dict:
        return {
            "rule": self.rule,
            "status": self.status,
            "error": str(self.error) if self.error else None,
            "error_kind": self.error.kind if self.error else None,
            "fetches": self.fetches,
            "elapsed": round(self.elapsed, 3),
        }


class ExecutionContext:
    """Runs one rule against one drop. Never raises."""

    def __init__(self, drop: Drop, rule: "BaseRule", toolbox: Toolbox):
        self.drop = drop
        self.rule = rule
        self.toolbox = toolbox
        self.view = DropView(drop, rule.name)
        self.console = Console(rule.name)

    def run(self) -> RuleOutcome:
        outcome = RuleOutcome(drop=self.drop, rule=self.rule.name)
        start = time.monotonic()
        logger.info(f"[{self.rule.name}] Running rule on {self.drop.url}")

        try:
            self.rule.apply(self.view, self.toolbox, self.console)
            outcome.status = "applied"
        except Exception as e:
            outcome.status = "failed"
            outcome.error = RoutineError(self.rule.name, self.drop.domain, self.drop.url, e)
            logger.error(
                f"[{self.rule.name}] Rule failed: domain={self.drop.domain} url={self.drop.url} "
                f"kind={outcome.error.kind} error={e}"
            )

        outcome.fetches = self.toolbox.fetches
        outcome.elapsed = time.monotonic() - start
        logger.debug(f"[{self.rule.name}] Done: {outcome.status}, {outcome.fetches} fetches, {outcome.elapsed:.2f}s")
        return outcome
