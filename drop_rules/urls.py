"""URL helpers exposed to rules: parsing and unescaping, no network I/O."""

from typing import Dict, List
from urllib.parse import parse_qs, unquote, unquote_plus, urlsplit, urlunsplit

from .errors import ParseError


class ParsedURL:
    """A mutable, parsed absolute URL.

    Rules get their own copy, so changing `path` or `raw_query` and calling
    `str()` is the way to build a derived URL.
    """

    def __init__(self, scheme: str, netloc: str, path: str = "", raw_query: str = "", fragment: str = ""):
        self.scheme = scheme
        self.netloc = netloc
        self.path = path
        self.raw_query = raw_query
        self.fragment = fragment

    @property
    def hostname(self) -> str:
        return (urlsplit(f"//{self.netloc}").hostname or "").lower()

    def query(self) -> Dict[str, List[str]]:
        return parse_qs(self.raw_query, keep_blank_values=True)

    def query_get(self, name: str) -> str:
        values = self.query().get(name)
        return values[0] if values else ""

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.raw_query, self.fragment))

    def __repr__(self) -> str:
        return f"ParsedURL({str(self)!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, ParsedURL) and str(self) == str(other)

    # Mutable, so not hashable
    __hash__ = None


def parse_url(src: str) -> ParsedURL:
    if not isinstance(src, str):
        raise ParseError(repr(src), "not a string")
    try:
        parts = urlsplit(src.strip())
        # Accessing the port validates it
        parts.port
    except ValueError as e:
        raise ParseError(src, str(e)) from e

    if not parts.scheme or not parts.netloc:
        raise ParseError(src, "not an absolute URL")

    return ParsedURL(parts.scheme, parts.netloc, parts.path, parts.query, parts.fragment)


def unescape_url(src: str) -> str:
    """Return the URL with its path and query string percent-decoded."""
    url = parse_url(src)
    url.path = unquote(url.path)
    url.raw_query = unquote_plus(url.raw_query)
    return str(url)
