"""Domain -> rule lookup."""

import logging
from typing import Dict, List, Optional

from .config import AppConfig
from .rules import ALL_RULES, BaseRule

logger = logging.getLogger("drop_rules")


class RuleRegistry:
    """Maps an exact domain string to at most one rule.

    Matching is literal: a rule registered for "site.com" does not run on
    "www.site.com".
    """

    def __init__(self, rules: Optional[List[BaseRule]] = None):
        self._rules: Dict[str, BaseRule] = {}
        for rule in rules or []:
            self.register(rule)

    @classmethod
    def default(cls, config: Optional[AppConfig] = None) -> "RuleRegistry":
        """Build the registry from the shipped rules, minus disabled ones."""
        registry = cls()
        for domain, rule_cls in ALL_RULES.items():
            if config is not None and not config.rule_enabled(domain):
                logger.info(f"[{rule_cls.name}] Disabled in config, skipping.")
                continue
            registry.register(rule_cls())
        return registry

    def register(self, rule: BaseRule, replace: bool = False):
        if not rule.domain:
            raise ValueError(f"{rule!r} has no domain")
        existing = self._rules.get(rule.domain)
        if existing is not None and not replace:
            raise ValueError(f"{rule.domain} already has a rule: {existing.name}")
        self._rules[rule.domain] = rule

    def unregister(self, domain: str) -> Optional[BaseRule]:
        return self._rules.pop(domain, None)

    def dispatch(self, domain: str) -> Optional[BaseRule]:
        return self._rules.get(domain)

    def domains(self) -> List[str]:
        return sorted(self._rules)

    def __contains__(self, domain: str) -> bool:
        return domain in self._rules

    def __len__(self) -> int:
        return len(self._rules)
