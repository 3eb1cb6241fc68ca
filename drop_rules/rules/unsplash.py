"""Unsplash: a /photos/* page is a photo, and /napi/photos/* has the details."""

from .base import BaseRule


class UnsplashRule(BaseRule):
    name = "unsplash"
    domain = "unsplash.com"

    def apply(self, drop, tools, console):
        url = drop.url
        if not url.path.startswith("/photos/"):
            return
        drop.set_document_type("photo")

        url.path = "/napi" + url.path
        node = tools.fetch_json(str(url))

        author = node.get("$.user.name")
        if author:
            drop.set_authors(author)

        title = node.get("$.description")
        if title:
            drop.set_title(title)

        description = node.get("$.alt_description")
        if description:
            drop.set_description(description)

        date = node.get("$.created_at")
        if date:
            drop.set_meta("html.date", date)
