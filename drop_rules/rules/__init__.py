"""Rule registry table: domain -> rule class."""

from .base import BaseRule, FunctionRule
from .deviantart import DeviantArtRule
from .pinterest import PinterestRule
from .reddit import RedditRule
from .unsplash import UnsplashRule
from .vimeo import VimeoRule

ALL_RULES = {
    "deviantart.com": DeviantArtRule,
    "pinterest.com": PinterestRule,
    "reddit.com": RedditRule,
    "unsplash.com": UnsplashRule,
    "vimeo.com": VimeoRule,
}

__all__ = ["ALL_RULES", "BaseRule", "FunctionRule"]
