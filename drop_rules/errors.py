"""Error kinds raised by the toolbox and reported by the execution context."""

from typing import Optional


class RuleEngineError(Exception):
    """Base class for every error raised by the rule engine."""


class FetchError(RuleEngineError):
    """Network or transport failure, timeout, non-2xx status or exhausted fetch budget."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status = status


class DecodeError(RuleEngineError):
    """Response body is not valid JSON."""

    def __init__(self, url: str, message: str):
        super().__init__(f"invalid JSON from {url}: {message}")
        self.url = url


class ParseError(RuleEngineError):
    """Malformed URL given to the toolbox."""

    def __init__(self, value: str, message: str):
        super().__init__(f"cannot parse URL {value!r}: {message}")
        self.value = value


class RoutineError(RuleEngineError):
    """Uncaught failure of a rule body, wrapping the original exception."""

    def __init__(self, rule: str, domain: str, url: str, cause: BaseException):
        super().__init__(f"rule {rule} failed on {url}: {type(cause).__name__}: {cause}")
        self.rule = rule
        self.domain = domain
        self.url = url
        self.cause = cause

    @property
    def kind(self) -> str:
        return type(self.cause).__name__
