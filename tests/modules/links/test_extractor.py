"""Tests for link preview metadata extraction."""

from blog_api.modules.links.extractor import extract_metadata


def page(head: str, body: str = "") -> bytes:
    return f"<html><head>{head}</head><body>{body}</body></html>".encode()


class TestTitle:
    def test_plain_title(self):
        assert extract_metadata(page("<title>  Plain  </title>")).title == "Plain"

    def test_og_title_wins_when_it_comes_first(self):
        html = page('<meta property="og:title" content="OG"><title>Plain</title>')
        assert extract_metadata(html).title == "OG"

    def test_og_title_wins_when_it_comes_last(self):
        html = page('<title>Plain</title><meta property="og:title" content="OG">')
        assert extract_metadata(html).title == "OG"

    def test_last_og_title_wins(self):
        html = page(
            '<meta property="og:title" content="first">'
            '<meta property="og:title" content="second">'
        )
        assert extract_metadata(html).title == "second"

    def test_empty_og_title_is_ignored(self):
        html = page('<title>Plain</title><meta property="og:title" content="">')
        assert extract_metadata(html).title == "Plain"


class TestDescription:
    def test_meta_description_fallback(self):
        html = page('<meta name="description" content="plain desc">')
        assert extract_metadata(html).description == "plain desc"

    def test_og_description_overrides_earlier_plain(self):
        html = page(
            '<meta name="description" content="plain">'
            '<meta property="og:description" content="og">'
        )
        assert extract_metadata(html).description == "og"

    def test_plain_description_does_not_override_og(self):
        html = page(
            '<meta property="og:description" content="og">'
            '<meta name="description" content="plain">'
        )
        assert extract_metadata(html).description == "og"

    def test_first_plain_description_wins(self):
        html = page(
            '<meta name="description" content="first">'
            '<meta name="description" content="second">'
        )
        assert extract_metadata(html).description == "first"


class TestImage:
    def test_og_image(self):
        html = page('<meta property="og:image" content="https://x.test/a.png">')
        assert extract_metadata(html).image == "https://x.test/a.png"

    def test_twitter_image_only_fills_gap(self):
        html = page(
            '<meta property="og:image" content="https://x.test/og.png">'
            '<meta name="twitter:image" content="https://x.test/tw.png">'
        )
        assert extract_metadata(html).image == "https://x.test/og.png"

    def test_og_image_overrides_twitter(self):
        html = page(
            '<meta name="twitter:image" content="https://x.test/tw.png">'
            '<meta property="og:image" content="https://x.test/og.png">'
        )
        assert extract_metadata(html).image == "https://x.test/og.png"

    def test_twitter_image_via_property(self):
        html = page('<meta property="twitter:image" content="https://x.test/tw.png">')
        assert extract_metadata(html).image == "https://x.test/tw.png"

    def test_no_image(self):
        assert extract_metadata(page("<title>x</title>")).image is None


class TestDocumentShapes:
    def test_empty_document(self):
        meta = extract_metadata(b"")
        assert (meta.title, meta.description, meta.image) == (None, None, None)

    def test_tags_outside_head(self):
        html = page("", '<meta property="og:title" content="In body">')
        assert extract_metadata(html).title == "In body"

    def test_values_are_trimmed(self):
        html = page(
            '<meta property="og:title" content="  spaced  ">'
            '<meta property="og:description" content="\n desc \t">'
        )
        meta = extract_metadata(html)
        assert meta.title == "spaced"
        assert meta.description == "desc"
