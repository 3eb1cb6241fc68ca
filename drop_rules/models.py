"""Data models for the enrichment record."""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlsplit

DOCUMENT_TYPES = ("", "article", "photo", "video", "audio", "music")


class DropMeta(dict):
    """Collected metadata: each name maps to a list of values."""

    def add(self, name: str, value: str):
        self.setdefault(name, []).append(value)

    def lookup(self, *names: str) -> List[str]:
        """Return all the values of the first name present."""
        for name in names:
            if name in self:
                return self[name]
        return []

    def lookup_get(self, *names: str) -> str:
        values = self.lookup(*names)
        return values[0] if values else ""


def domain_from_url(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


@dataclass
class Drop:
    url: str
    domain: str = ""
    title: str = ""
    description: str = ""
    authors: List[str] = field(default_factory=list)
    document_type: str = ""
    meta: DropMeta = field(default_factory=DropMeta)
    # Written by rules, never merged back into `meta`
    extra_meta: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.domain:
            self.domain = domain_from_url(self.url)
        if not isinstance(self.meta, DropMeta):
            self.meta = DropMeta({k: list(v) for k, v in self.meta.items()})

    def effective_meta(self) -> DropMeta:
        """Upstream metadata overlaid with the values written by a rule."""
        merged = DropMeta(copy.deepcopy(dict(self.meta)))
        for name, values in self.extra_meta.items():
            merged[name] = list(values)
        return merged

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "domain": self.domain,
            "title": self.title,
            "description": self.description,
            "authors": list(self.authors),
            "document_type": self.document_type,
            "meta": {k: list(v) for k, v in self.meta.items()},
            "extra_meta": {k: list(v) for k, v in self.extra_meta.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Drop":
        if not data.get("url"):
            raise ValueError("a drop needs a url")

        def _values(raw: Optional[dict]) -> Dict[str, List[str]]:
            out = {}
            for name, values in (raw or {}).items():
                out[name] = [values] if isinstance(values, str) else list(values)
            return out

        return cls(
            url=data["url"],
            domain=data.get("domain") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            authors=list(data.get("authors") or []),
            document_type=data.get("document_type") or "",
            meta=DropMeta(_values(data.get("meta"))),
            extra_meta=_values(data.get("extra_meta")),
        )
