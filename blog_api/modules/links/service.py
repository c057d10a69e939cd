from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import urlparse

import httpx

from blog_api.core.logging import get_logger
from blog_api.modules.links.extractor import ExtractedMetadata, MetadataParseError, extract_metadata

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; BlogAPI/1.0; +http://example.com/bot)"


class LinkPreviewError(Exception):
    code = "URL_NOT_ACCESSIBLE"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidURLError(LinkPreviewError):
    code = "INVALID_URL"


class RequestTimeoutError(LinkPreviewError):
    code = "REQUEST_TIMEOUT"


class URLNotAccessibleError(LinkPreviewError):
    code = "URL_NOT_ACCESSIBLE"


class LinkParseError(LinkPreviewError):
    code = "PARSE_ERROR"


def validate_url(url: Optional[str]) -> str:
    if not url:
        raise InvalidURLError("URL parameter is missing or malformed")
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidURLError("URL parameter is missing or malformed")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidURLError("URL parameter is missing or malformed")
    return url


class LinkPreviewService:
    """
    Fetches a remote page and extracts its preview metadata.

    The whole request, body included, is bounded by ``timeout`` seconds of
    wall-clock time. Only a 200 response is parsed; redirects are followed.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport
        self.logger = logger or get_logger(__name__)

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            return await client.get(url)

    async def _download(self, url: str) -> bytes:
        # wall-clock bound over the whole exchange, body read included
        try:
            async with asyncio.timeout(self.timeout):
                response = await self._get(url)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Unable to fetch the URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise URLNotAccessibleError(f"Unable to fetch the URL: {exc}") from exc
        except TimeoutError as exc:
            raise RequestTimeoutError(
                f"Unable to fetch the URL: no complete response within {self.timeout}s"
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise URLNotAccessibleError(f"URL returned status code: {response.status_code}")
        return response.content

    async def fetch(self, url: Optional[str]) -> ExtractedMetadata:
        target = validate_url(url)
        body = await self._download(target)

        try:
            metadata = extract_metadata(body)
        except MetadataParseError as exc:
            raise LinkParseError("Failed to parse URL metadata") from exc

        self.logger.info("fetched link metadata", url=target, title=metadata.title)
        return metadata
