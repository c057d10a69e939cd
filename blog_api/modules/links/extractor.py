"""Pull title, description and preview image out of an HTML page.

Open Graph tags win over the document title and always overwrite earlier
values. ``name="description"`` and ``twitter:image`` only fill gaps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup
from bs4.exceptions import ParserRejectedMarkup


class MetadataParseError(Exception):
    pass


@dataclass
class ExtractedMetadata:
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


def _attr(tag, name: str) -> str:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or ""


def _trimmed(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def extract_metadata(html: bytes | str) -> ExtractedMetadata:
    try:
        soup = BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as exc:
        raise MetadataParseError(str(exc)) from exc

    meta = ExtractedMetadata()

    # document order, depth first
    for tag in soup.find_all(["title", "meta"]):
        if tag.name == "title":
            if not meta.title and tag.string:
                meta.title = str(tag.string)
            continue

        prop = _attr(tag, "property")
        name = _attr(tag, "name")
        content = _attr(tag, "content")
        if not content:
            continue

        if prop == "og:title":
            meta.title = content
        elif prop == "og:description":
            meta.description = content
        elif prop == "og:image":
            meta.image = content

        if name == "description" and not meta.description:
            meta.description = content
        if "twitter:image" in (name, prop) and meta.image is None:
            meta.image = content

    meta.title = _trimmed(meta.title)
    meta.description = _trimmed(meta.description)
    meta.image = _trimmed(meta.image)
    return meta
