from drop_rules.models import Drop

DEVIANT_LINK = (
    "https://backend.deviantart.com/oembed?url=https%3A%2F%2Fwww.deviantart.com%2Fartist%2Fart%2Fpiece-1"
    "&format=json"
)
DEVIANT_API = "https://backend.deviantart.com/oembed?url=https://www.deviantart.com/artist/art/piece-1&format=json"


def _meta(drop, name):
    return drop.effective_meta().get(name)


# --- deviantart ---

def test_deviantart_photo(engine, web):
    web.add(DEVIANT_API, {
        "author_name": "artist",
        "pubdate": "2020-03-01T10:00:00-08:00",
        "type": "photo",
        "url": "https://images.example/piece.jpg?token=a&amp;b=1",
    })
    drop = Drop(url="https://deviantart.com/artist/art/piece-1",
                meta={"link.alternate": ["https://www.deviantart.com/rss", DEVIANT_LINK]})

    outcome = engine.run(drop)

    assert outcome.status == "applied"
    assert web.requested and "backend.deviantart.com/oembed" in web.requested[0]
    assert drop.authors == ["artist"]
    assert _meta(drop, "html.date") == ["2020-03-01T10:00:00-08:00"]
    assert drop.document_type == "photo"
    assert _meta(drop, "x.picture_url") == ["https://images.example/piece.jpg?token=a&b=1"]


def test_deviantart_non_photo(engine, web):
    web.add(DEVIANT_API, {"author_name": "artist", "type": "rich"})
    drop = Drop(url="https://deviantart.com/artist/journal/1", meta={"link.alternate": [DEVIANT_LINK]})

    engine.apply(drop)

    assert drop.authors == ["artist"]
    assert drop.document_type == ""
    assert _meta(drop, "x.picture_url") is None


def test_deviantart_without_json_link(engine, web):
    drop = Drop(url="https://deviantart.com/x", meta={"link.alternate": ["https://www.deviantart.com/rss"]})
    before = drop.to_dict()

    engine.apply(drop)

    assert web.requested == []
    assert drop.to_dict() == before


# --- pinterest ---

def test_pinterest_ignores_non_pin_pages(engine):
    drop = Drop(url="https://pinterest.com/ideas/", meta={"graph.image": ["https://img/x.jpg"]})
    engine.apply(drop)
    assert drop.document_type == ""


# --- reddit ---

REDDIT_URL = "https://www.reddit.com/r/pics/comments/abc/a_cat/"
REDDIT_JSON = "https://www.reddit.com/r/pics/comments/abc/a_cat.json"
REDDIT_API = "https://gateway.reddit.com/desktopapi/v1/postcomments/t3_abc"


def _reddit_listing(hint):
    return [{"data": {"children": [{"data": {"name": "t3_abc", "post_hint": hint}}]}}]


def test_reddit_image_post(engine, web):
    web.add(REDDIT_JSON, _reddit_listing("image"))
    web.add(REDDIT_API, {"posts": {"t3_abc": {
        "title": "A cat",
        "author": "someone",
        "media": {"resolutions": [
            {"url": "https://preview.redd.it/small.jpg?a=1&amp;b=2"},
            {"url": "https://preview.redd.it/large.jpg?a=1&amp;b=2"},
        ]},
    }}})
    drop = Drop(url=REDDIT_URL, domain="reddit.com", description="Upstream description")

    outcome = engine.run(drop)

    assert outcome.status == "applied"
    assert outcome.fetches == 2
    assert drop.document_type == "photo"
    assert _meta(drop, "x.picture_url") == ["https://preview.redd.it/large.jpg?a=1&b=2"]
    assert drop.title == "A cat"
    assert drop.authors == ["someone"]
    assert drop.description == ""


def test_reddit_text_post(engine, web):
    web.add(REDDIT_JSON, _reddit_listing("self"))
    drop = Drop(url=REDDIT_URL, domain="reddit.com", title="Upstream")

    outcome = engine.run(drop)

    assert outcome.status == "applied"
    assert outcome.fetches == 1
    assert web.requested == [REDDIT_JSON]

    assert drop.document_type == ""
    assert drop.title == "Upstream"


def test_reddit_second_fetch_failure(engine, web):
    web.add(REDDIT_JSON, _reddit_listing("image"))
    web.add(REDDIT_API, {"error": "nope"}, status=500)
    drop = Drop(url=REDDIT_URL, domain="reddit.com", title="Upstream")
    before = drop.to_dict()

    outcome = engine.run(drop)

    assert outcome.status == "failed"
    assert outcome.error.kind == "FetchError"
    assert drop.to_dict() == before


def test_reddit_only_runs_on_exact_domain(engine, web):
    drop = Drop(url=REDDIT_URL)
    assert drop.domain == "www.reddit.com"
    assert engine.run(drop).status == "skipped"
    assert web.requested == []


# --- unsplash ---

def test_unsplash_photo(engine, web):
    web.add("https://unsplash.com/napi/photos/xyz", {
        "user": {"name": "Photographer"},
        "description": "Mountains",
        "alt_description": "snowy peaks at dawn",
        "created_at": "2019-07-01T12:00:00Z",
    })
    drop = Drop(url="https://unsplash.com/photos/xyz")

    engine.apply(drop)

    assert drop.document_type == "photo"
    assert drop.authors == ["Photographer"]
    assert drop.title == "Mountains"
    assert drop.description == "snowy peaks at dawn"
    assert _meta(drop, "html.date") == ["2019-07-01T12:00:00Z"]


def test_unsplash_api_failure_keeps_type(engine, web):
    web.add("https://unsplash.com/napi/photos/xyz", raw=b"<html></html>")
    drop = Drop(url="https://unsplash.com/photos/xyz", title="Upstream")

    outcome = engine.run(drop)

    assert outcome.error.kind == "DecodeError"
    assert drop.document_type == "photo"
    assert drop.title == "Upstream"


def test_unsplash_other_pages(engine, web):
    drop = Drop(url="https://unsplash.com/t/nature")
    engine.apply(drop)
    assert drop.document_type == ""
    assert web.requested == []


# --- vimeo ---

def test_vimeo_thumbnail(engine):
    thumb = ("https://i.vimeocdn.com/filter/overlay?src0=https%3A%2F%2Fi.vimeocdn.com%2Fvideo%2F123_1280.jpg"
             "&src1=https%3A%2F%2Ff.vimeocdn.com%2Fp%2Fimages%2Fcrawler_play.png")
    drop = Drop(url="https://vimeo.com/123", meta={"graph.image": [thumb]})

    engine.apply(drop)

    assert _meta(drop, "x.picture_url") == ["https://i.vimeocdn.com/video/123_1280.jpg"]
    assert drop.meta["graph.image"] == [thumb]


def test_vimeo_without_overlay(engine):
    drop = Drop(url="https://vimeo.com/123", meta={"graph.image": ["https://i.vimeocdn.com/video/1.jpg"]})
    engine.apply(drop)
    assert drop.extra_meta == {}


def test_vimeo_without_image(engine):
    drop = Drop(url="https://vimeo.com/123")
    assert engine.run(drop).status == "applied"
    assert drop.extra_meta == {}
