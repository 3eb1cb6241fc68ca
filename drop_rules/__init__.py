"""Per-site metadata enrichment rules for fetched documents."""

from .engine import RuleEngine, apply_rules
from .errors import DecodeError, FetchError, ParseError, RoutineError, RuleEngineError
from .models import Drop, DropMeta
from .registry import RuleRegistry

__version__ = "0.1.0"
__all__ = [
    "RuleEngine",
    "RuleRegistry",
    "apply_rules",
    "Drop",
    "DropMeta",
    "RuleEngineError",
    "FetchError",
    "DecodeError",
    "ParseError",
    "RoutineError",
]
