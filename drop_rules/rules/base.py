"""Abstract base class for all site rules."""

from abc import ABC, abstractmethod
from typing import Callable

from ..context import Console, DropView
from ..toolbox import Toolbox


class BaseRule(ABC):
    name: str = ""
    domain: str = ""

    @abstractmethod
    def apply(self, drop: DropView, tools: Toolbox, console: Console):
        """Inspect the drop and write whatever the site gives us."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain={self.domain!r})"


class FunctionRule(BaseRule):
    """Wraps a plain `fn(drop, tools, console)` callable as a rule."""

    def __init__(self, name: str, domain: str, fn: Callable[[DropView, Toolbox, Console], None]):
        self.name = name
        self.domain = domain
        self._fn = fn

    def apply(self, drop: DropView, tools: Toolbox, console: Console):
        self._fn(drop, tools, console)
