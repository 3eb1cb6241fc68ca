"""Pinterest: a pin is an image (and a link to somewhere)."""

from .base import BaseRule


class PinterestRule(BaseRule):
    name = "pinterest"
    domain = "pinterest.com"

    def apply(self, drop, tools, console):
        if not drop.url.path.startswith("/pin/"):
            return

        image = drop.meta.lookup_get("graph.image")
        if image:
            drop.set_document_type("photo")
            drop.set_meta("x.picture_url", image)
