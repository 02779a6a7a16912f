"""Image reference resolution.

A reference is one of: an inline ``data:`` URL, an absolute http(s) URL or a
site-relative path. The resolver picks the fetchers that can handle the
reference and tries them in order until one produces a decodable image:

* inline references  -> decoded in memory
* absolute URLs      -> downloaded
* relative paths     -> read from the static root, then downloaded from the site origin

Fetchers are blocking; each attempt runs in a worker thread under an optional
deadline so a slow host cannot stall composition.
"""

import asyncio
from typing import List, Optional, Sequence

import requests

from ..config import Config
from ..models.data_models import ResolvedImage
from .exceptions import ImageResolutionError
from .image_fetchers import HttpImageFetcher, ImageFetcher, InlineImageFetcher, LocalAssetFetcher
from .logging_config import LoggerMixin


class ImageResolver(LoggerMixin):

    def __init__(self, fetchers: Sequence[ImageFetcher], timeout: Optional[float] = None):
        if not fetchers:
            raise ValueError("ImageResolver needs at least one fetcher")
        self.fetchers = tuple(fetchers)
        self.timeout = timeout

    def strategies_for(self, reference: str) -> List[ImageFetcher]:
        return [fetcher for fetcher in self.fetchers if fetcher.supports(reference)]

    async def resolve(self, reference: Optional[str], timeout: Optional[float] = None) -> ResolvedImage:
        if not reference or not reference.strip():
            raise ImageResolutionError(reference or "", message="Empty image reference")

        try:
            strategies = self.strategies_for(reference)
        except Exception as e:
            raise ImageResolutionError(reference, e, message="Image reference could not be classified")
        if not strategies:
            raise ImageResolutionError(reference, message="No fetcher can handle this image reference")

        last_error = None
        for fetcher in strategies:
            try:
                image = await self._attempt(fetcher, reference, timeout)
                self.logger.debug(f"Resolved image via {fetcher.name} ({image.width}x{image.height})")
                return image
            except ImageResolutionError as e:
                last_error = e
                self.log_warning(f"Image fetch via {fetcher.name} failed: {e.message}", error_details=e.details)

        raise ImageResolutionError(reference, last_error.cause or last_error)

    async def _attempt(self, fetcher: ImageFetcher, reference: str, timeout: Optional[float]) -> ResolvedImage:
        deadline = timeout if timeout is not None else self.timeout
        try:
            task = asyncio.to_thread(fetcher.fetch, reference)
            if deadline is None:
                return await task
            return await asyncio.wait_for(task, deadline)
        except ImageResolutionError:
            raise
        except asyncio.TimeoutError as e:
            raise ImageResolutionError(reference, e, message=f"Image fetch timed out after {deadline}s")
        except Exception as e:
            raise ImageResolutionError(reference, e)


def build_image_resolver(config: Optional[Config] = None, session: Optional[requests.Session] = None) -> ImageResolver:
    """Default resolver: inline decode, static-root decode, then HTTP."""
    config = config or Config()
    fallback = config.fallback_image_size
    fetchers = [
        InlineImageFetcher(fallback_size=fallback),
        LocalAssetFetcher(config.STATIC_ROOT),
        HttpImageFetcher(
            session=session,
            origin=config.SITE_ORIGIN,
            timeout=config.IMAGE_FETCH_TIMEOUT_SECONDS,
            fallback_size=fallback
        ),
    ]
    return ImageResolver(fetchers, timeout=config.IMAGE_FETCH_TIMEOUT_SECONDS)
