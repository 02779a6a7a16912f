import base64
import binascii
import re
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes, urljoin, urlparse

import requests
from PIL import Image

from ..models.data_models import ResolvedImage
from .exceptions import ImageResolutionError

DEFAULT_FALLBACK_SIZE = (200, 200)
DEFAULT_MIME_TYPE = "image/png"


def is_inline_reference(reference: str) -> bool:
    return reference.strip().lower().startswith('data:')


def is_absolute_url(reference: str) -> bool:
    try:
        return urlparse(reference.strip()).scheme.lower() in ('http', 'https')
    except ValueError:
        # e.g. an unbalanced IPv6 bracket in the netloc
        return False


def is_relative_reference(reference: str) -> bool:
    return not (is_inline_reference(reference) or is_absolute_url(reference))


def probe_image(data: bytes) -> Tuple[int, int, Optional[str]]:
    """Decode in-process and return (width, height, mime). Raises on undecodable bytes."""
    with Image.open(BytesIO(data)) as image:
        image.load()
        return image.width, image.height, Image.MIME.get(image.format or "")


def probe_or_fallback(data: bytes, fallback: Tuple[int, int]) -> Tuple[int, int, Optional[str]]:
    try:
        return probe_image(data)
    except (OSError, ValueError, Image.DecompressionBombError):
        return fallback[0], fallback[1], None


class ImageFetcher(ABC):
    """One way of turning an image reference into bytes plus pixel dimensions."""

    name = "base"

    @abstractmethod
    def supports(self, reference: str) -> bool:
        ...

    @abstractmethod
    def fetch(self, reference: str) -> ResolvedImage:
        """Resolve a reference. Raises ImageResolutionError on any failure."""
        ...


class InlineImageFetcher(ImageFetcher):
    """Decodes ``data:image/...`` references without any I/O."""

    name = "inline"

    def __init__(self, fallback_size: Tuple[int, int] = DEFAULT_FALLBACK_SIZE):
        self.fallback_size = fallback_size

    def supports(self, reference: str) -> bool:
        return is_inline_reference(reference)

    def fetch(self, reference: str) -> ResolvedImage:
        header, separator, payload = reference.strip().partition(',')
        if not separator or not payload:
            raise ImageResolutionError(reference, message="Inline image has no payload")

        media = header[len('data:'):]
        is_base64 = media.lower().endswith(';base64')
        mime_type = (media.split(';', 1)[0] or DEFAULT_MIME_TYPE).lower()
        try:
            if is_base64:
                # Wrapped (MIME-style) base64 is still valid
                data = base64.b64decode(re.sub(r'\s+', '', payload), validate=True)
            else:
                data = unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as e:
            raise ImageResolutionError(reference, e, message="Inline image payload is not valid base64")

        width, height, _ = probe_or_fallback(data, self.fallback_size)
        return ResolvedImage(data=data, width=width, height=height, mime_type=mime_type, source=reference)


class LocalAssetFetcher(ImageFetcher):
    """Decodes site-relative paths straight from the static asset directory."""

    name = "local"

    def __init__(self, static_root: Path):
        self.static_root = Path(static_root)

    def supports(self, reference: str) -> bool:
        return is_relative_reference(reference)

    def _asset_path(self, reference: str) -> Path:
        relative = urlparse(reference.strip()).path.lstrip('/')
        root = self.static_root.resolve()
        candidate = (root / relative).resolve()
        if root != candidate and root not in candidate.parents:
            raise ImageResolutionError(reference, message="Asset path escapes the static root")
        return candidate

    def fetch(self, reference: str) -> ResolvedImage:
        path = self._asset_path(reference)
        try:
            data = path.read_bytes()
            width, height, mime_type = probe_image(data)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageResolutionError(reference, e)
        return ResolvedImage(data=data, width=width, height=height,
                             mime_type=mime_type or DEFAULT_MIME_TYPE, source=reference)


class HttpImageFetcher(ImageFetcher):
    """Downloads absolute URLs, and relative paths when a site origin is known."""

    name = "http"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        origin: Optional[str] = None,
        timeout: float = 10.0,
        fallback_size: Tuple[int, int] = DEFAULT_FALLBACK_SIZE
    ):
        self.session = session or requests.Session()
        self.origin = origin
        self.timeout = timeout
        self.fallback_size = fallback_size

    def supports(self, reference: str) -> bool:
        if is_absolute_url(reference):
            return True
        return bool(self.origin) and is_relative_reference(reference)

    def url_for(self, reference: str) -> str:
        reference = reference.strip()
        return reference if is_absolute_url(reference) else urljoin(self.origin.rstrip('/') + '/', reference.lstrip('/'))

    def fetch(self, reference: str) -> ResolvedImage:
        url = self.url_for(reference)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageResolutionError(reference, e)

        data = response.content
        if not data:
            raise ImageResolutionError(reference, message=f"Empty response body from {url}")

        width, height, sniffed_mime = probe_or_fallback(data, self.fallback_size)
        header_mime = (response.headers.get('Content-Type') or '').split(';', 1)[0].strip().lower()
        mime_type = header_mime if header_mime.startswith('image/') else sniffed_mime or DEFAULT_MIME_TYPE
        return ResolvedImage(data=data, width=width, height=height, mime_type=mime_type, source=reference)
