"""YAML config loader."""

from dataclasses import dataclass, field
from typing import Dict

import yaml

DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:75.0) Gecko/20100101 Firefox/75.0"


@dataclass
class FetchConfig:
    timeout: float = 10.0
    max_fetches: int = 5
    invocation_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "en-US,en;q=0.8"
    max_body_size: int = 5242880


@dataclass
class RuleConfig:
    enabled: bool = True
    description: str = ""


@dataclass
class AppConfig:
    log_dir: str = "logs"
    log_level: str = "INFO"
    max_workers: int = 4
    fetch: FetchConfig = field(default_factory=FetchConfig)
    rules: Dict[str, RuleConfig] = field(default_factory=dict)

    def rule_enabled(self, domain: str) -> bool:
        rule_config = self.rules.get(domain)
        return rule_config is None or rule_config.enabled


def load_config(config_path: str = "config.yaml") -> AppConfig:
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    fetch_raw = raw.get("fetch") or {}
    fetch = FetchConfig(**{k: v for k, v in fetch_raw.items() if k in FetchConfig.__dataclass_fields__})

    rules = {}
    for domain, rule_raw in (raw.get("rules") or {}).items():
        rule_raw = rule_raw or {}
        rules[domain] = RuleConfig(**{k: v for k, v in rule_raw.items() if k in RuleConfig.__dataclass_fields__})

    return AppConfig(
        log_dir=raw.get("log_dir", "logs"),
        log_level=raw.get("log_level", "INFO"),
        max_workers=raw.get("max_workers", 4),
        fetch=fetch,
        rules=rules,
    )
