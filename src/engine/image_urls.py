import logging
import re
from typing import Iterable, Optional
from urllib.parse import urlparse

from cloudinary.utils import cloudinary_url

from src.core.exceptions import CandidateProcessingError

logger = logging.getLogger("SceneEngine")

_PINIMG_CLEAN_RE = re.compile(r"(https?://i\.pinimg\.com/[^\"'\s}),;]+\.(?:jpg|jpeg|png|webp|gif))", re.IGNORECASE)
_PINIMG_VALID_RE = re.compile(r"^https?://i\.pinimg\.com/[^\"'\s]+\.(?:jpg|jpeg|png|webp|gif)$", re.IGNORECASE)
_PINIMG_SIZE_RE = re.compile(r"/(?:236|474|564)x\d*/")


def enhance_pinterest_url(image_url: str) -> str:
    """
    Upgrades a Pinterest CDN thumbnail URL to the 736px rendition at high quality.
    Non-Pinterest URLs come back untouched.
    """
    if not image_url or "pinimg.com" not in image_url:
        return image_url

    match = _PINIMG_CLEAN_RE.search(image_url)
    enhanced = match.group(1) if match else image_url

    enhanced = re.sub(r"[?&]resize=\d+[^\s&]*", "", enhanced)
    enhanced = re.sub(r"[?&]quality=\d+", "", enhanced)

    # originals are already the largest rendition
    if "/originals/" not in enhanced:
        enhanced = _PINIMG_SIZE_RE.sub("/736x/", enhanced)

    if _PINIMG_VALID_RE.match(enhanced) and "quality=" not in enhanced and "q=" not in enhanced:
        enhanced += "?quality=95"

    return enhanced


class ImageUrlNormalizer:
    """
    Guarantees every scene URL is fetchable at the target resolution and format.

    Hosts in `direct_domains` already serve final assets. Anything else is
    routed through a Cloudinary fetch URL; without a cloud name configured the
    URL passes through unchanged.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        width: int = 1920,
        height: int = 1080,
        fetch_format: str = "webp",
        quality: int = 90,
        direct_domains: Iterable[str] = ("res.cloudinary.com", "cloudinary.com", "images.unsplash.com"),
    ):
        self.cloud_name = cloud_name
        self.width = width
        self.height = height
        self.fetch_format = fetch_format
        self.quality = quality
        self.direct_domains = tuple(d.lower() for d in direct_domains)

    @classmethod
    def from_settings(cls, settings) -> "ImageUrlNormalizer":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            width=settings.target_width,
            height=settings.target_height,
            fetch_format=settings.target_format,
            quality=settings.target_quality,
            direct_domains=settings.direct_cdn_domains,
        )

    def is_direct(self, image_url: str) -> bool:
        host = (urlparse(image_url).hostname or "").lower()
        return any(host == d or host.endswith("." + d) for d in self.direct_domains)

    def normalize(self, image_url: str) -> str:
        if not image_url or not image_url.strip():
            raise CandidateProcessingError("Scene has no image URL")

        image_url = image_url.strip()
        parsed = urlparse(image_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise CandidateProcessingError(f"Unsupported image URL: {image_url[:80]}")

        image_url = enhance_pinterest_url(image_url)

        if self.is_direct(image_url) or not self.cloud_name:
            return image_url

        try:
            proxied, _ = cloudinary_url(
                image_url,
                type="fetch",
                cloud_name=self.cloud_name,
                secure=True,
                width=self.width,
                height=self.height,
                crop="fill",
                fetch_format=self.fetch_format,
                quality=self.quality,
            )
        except Exception as e:
            raise CandidateProcessingError(f"Fetch URL construction failed: {e}")

        if not proxied:
            raise CandidateProcessingError("Fetch URL construction returned nothing")
        return proxied
