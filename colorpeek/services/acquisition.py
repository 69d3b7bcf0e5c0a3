"""
colorpeek Image Acquisition
Resolves a URL, a local path or a decoded image into a PIL image, retrying
cross-origin fetches once through a public CORS proxy.
"""
import asyncio
import time
from typing import Optional
from urllib.parse import quote

import requests
from PIL import Image

from colorpeek.config import config
from colorpeek.services.imaging import decode_image_bytes
from colorpeek.utils.logging import get_logger
from colorpeek.utils.metrics import get_metrics

log = get_logger()


class AcquisitionError(Exception):
    """Base error for image acquisition failures."""
    pass


class SourceMissingError(AcquisitionError):
    """Neither a source URL nor an image handle was supplied."""
    pass


class LoadFailureError(AcquisitionError):
    """The image could not be loaded, directly or through the proxy."""
    pass


def is_remote(src: str) -> bool:
    """True for http(s) URLs, which are eligible for the proxy retry."""
    return src.lower().startswith(("http://", "https://"))


def build_proxy_url(src: str, template: str = None) -> str:
    """Route a URL through the CORS proxy template."""
    if template is None:
        template = config.PROXY_URL_TEMPLATE
    return template.format(url=quote(src, safe=""))


class ImageAcquirer:
    """
    Loads images for palette extraction.

    Each call returns a freshly decoded image; no buffers are shared between
    calls, so one acquirer may serve concurrent extractions.
    """

    def __init__(self,
                 proxy_template: Optional[str] = None,
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.proxy_template = proxy_template or config.PROXY_URL_TEMPLATE
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT
        self.session = session

    def load(self, src: Optional[str] = None, image: Optional[Image.Image] = None) -> Image.Image:
        """
        Resolve a source into a decoded image.

        Args:
            src: http(s) URL or local file path; takes precedence over image
            image: Already decoded image handle

        Returns:
            Decoded PIL image

        Raises:
            SourceMissingError: If neither src nor image is given
            LoadFailureError: If the image cannot be loaded
        """
        if not src and image is None:
            raise SourceMissingError("Please provide either a source URL or an image reference")

        if not src:
            return image

        start_time = time.time()
        if is_remote(src):
            loaded = self._load_remote(src)
        else:
            loaded = self._load_local(src)

        get_metrics().record_timing("acquisition", (time.time() - start_time) * 1000)
        return loaded

    async def aload(self, src: Optional[str] = None, image: Optional[Image.Image] = None) -> Image.Image:
        """Async variant of load; the blocking fetch runs in a worker thread."""
        return await asyncio.to_thread(self.load, src, image)

    def _load_remote(self, src: str) -> Image.Image:
        try:
            return self._fetch(src)
        except requests.Timeout as e:
            log.error("Image fetch timed out", extra={"url": src, "timeout": self.timeout})
            raise LoadFailureError(f"Timed out loading image after {self.timeout}s") from e
        except (requests.RequestException, ValueError) as e:
            log.warning("Direct image load failed, retrying through proxy",
                        extra={"url": src, "error": str(e)})

        get_metrics().increment_proxy_retry_count()
        proxy_url = build_proxy_url(src, self.proxy_template)
        try:
            return self._fetch(proxy_url)
        except (requests.RequestException, ValueError) as e:
            log.error("Failed to load image for color extraction across origins",
                      extra={"url": src, "proxy_url": proxy_url, "error": str(e)})
            raise LoadFailureError("Failed to load image for color extraction across origins") from e

    def _fetch(self, url: str) -> Image.Image:
        getter = self.session.get if self.session is not None else requests.get
        response = getter(url, timeout=self.timeout)
        response.raise_for_status()
        return decode_image_bytes(response.content)

    def _load_local(self, path: str) -> Image.Image:
        try:
            with Image.open(path) as opened:
                opened.load()
                return opened.copy()
        except (Image.DecompressionBombError, OSError) as e:
            log.error("Failed to load local image", extra={"path": path, "error": str(e)})
            raise LoadFailureError(f"Failed to load image from {path}: {str(e)}") from e


# Global acquirer instance
_acquirer: Optional[ImageAcquirer] = None


def get_acquirer() -> ImageAcquirer:
    """Get or create global image acquirer."""
    global _acquirer
    if _acquirer is None:
        _acquirer = ImageAcquirer()
    return _acquirer
