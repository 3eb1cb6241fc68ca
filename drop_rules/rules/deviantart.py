"""DeviantArt: the oEmbed JSON link tells us the author, the date and whether it's a photo."""

import re

from .base import BaseRule

JSON_LINK = re.compile(r"format=json$")


class DeviantArtRule(BaseRule):
    name = "deviantart"
    domain = "deviantart.com"

    def apply(self, drop, tools, console):
        link = next((x for x in drop.meta.lookup("link.alternate") if JSON_LINK.search(x)), None)
        if not link:
            return

        # The link comes doubly encoded
        node = tools.fetch_json(tools.unescape_url(link))

        author = node.get("$.author_name")
        if author:
            drop.set_authors(author)

        date = node.get("$.pubdate")
        if date:
            drop.set_meta("html.date", date)

        if node.get("$.type") == "photo":
            drop.set_document_type("photo")

            img = node.get("$.url")
            if img:
                drop.set_meta("x.picture_url", tools.unescape(img))
                console.debug({"url": img}, "set picture")
