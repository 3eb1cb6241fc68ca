"""Reddit posts.

Any post gives a JSON payload when ".json" is appended to its URL. The post
details (picture resolutions, title, author) come from the desktop API.
"""

from .base import BaseRule


class RedditRule(BaseRule):
    name = "reddit"
    domain = "reddit.com"

    POST_API = "https://gateway.reddit.com/desktopapi/v1/postcomments/"

    def apply(self, drop, tools, console):
        url = drop.url
        url.path = url.path.rstrip("/") + ".json"
        url.fragment = ""
        listing = tools.fetch_json(str(url))

        post_id = listing.get("$[0].data.children[0].data.name")
        if not post_id:
            return
        if listing.get("$[0].data.children[0].data.post_hint") != "image":
            return

        post = tools.fetch_json(self.POST_API + post_id)

        drop.set_document_type("photo")
        img = post.get(f"$.posts['{post_id}'].media.resolutions[(@.length-1)].url")
        if img:
            drop.set_meta("x.picture_url", tools.unescape(img))
            console.debug({"url": img}, "set picture")

        title = post.get(f"$.posts['{post_id}'].title")
        if title:
            drop.set_title(title)

        author = post.get(f"$.posts['{post_id}'].author")
        if author:
            drop.set_authors(author)

        drop.set_description("")
