"""Vimeo: the large thumbnail has a play button baked in.

The plain picture URL is the `src0` query parameter of the thumbnail URL.
"""

from .base import BaseRule


class VimeoRule(BaseRule):
    name = "vimeo"
    domain = "vimeo.com"

    def apply(self, drop, tools, console):
        image = drop.meta.lookup_get("graph.image")
        if not image:
            return

        img = tools.parse_url(image).query_get("src0")
        if img:
            drop.set_meta("x.picture_url", img)
            console.debug({"url": img}, "set picture")
