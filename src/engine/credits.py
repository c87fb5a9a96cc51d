import logging
from typing import Dict, Optional

from src.core.exceptions import InvalidPackageError
from src.core.models import ContentType, CreditQuote

logger = logging.getLogger("SceneEngine")

# Credits charged per generation
IMAGE_GENERATION = 2
VIDEO_SHORT = 13
VIDEO_LONG = 18
AUDIO_SURCHARGE = 5

SHORT_VIDEO_MAX_SECONDS = 5

CREDIT_PACKAGES: Dict[str, dict] = {
    "tester": {"credits": 125, "price": 10.00, "name": "المبتدئ"},
    "starter": {"credits": 315, "price": 25.00, "name": "العادي"},
    "pro": {"credits": 650, "price": 50.00, "name": "البرو"},
    "business": {"credits": 1350, "price": 100.00, "name": "الأعمال"},
    "subscription": {"credits": 100, "price": 10.00, "name": "الاشتراك الشهري", "type": "subscription"},
}


def credits_needed(content_type: ContentType, video_duration_seconds: Optional[int] = None,
                   include_audio: bool = False) -> int:
    """
    Images cost a flat rate. Videos are priced by length (5s or less is short)
    plus a surcharge when audio is generated.
    """
    if content_type == ContentType.IMAGE:
        return IMAGE_GENERATION

    duration = video_duration_seconds or SHORT_VIDEO_MAX_SECONDS
    needed = VIDEO_SHORT if duration <= SHORT_VIDEO_MAX_SECONDS else VIDEO_LONG
    if include_audio:
        needed += AUDIO_SURCHARGE
    return needed


def has_sufficient_credits(balance: int, needed: int, is_admin: bool = False) -> bool:
    return is_admin or balance >= needed


def quote(content_type: ContentType, video_duration_seconds: Optional[int] = None,
          include_audio: bool = False, balance: int = 0, is_admin: bool = False) -> CreditQuote:
    needed = credits_needed(content_type, video_duration_seconds, include_audio)
    is_video = content_type == ContentType.VIDEO
    return CreditQuote(
        credits_needed=needed,
        content_type=content_type,
        is_short_video=is_video and (video_duration_seconds or SHORT_VIDEO_MAX_SECONDS) <= SHORT_VIDEO_MAX_SECONDS,
        includes_audio=is_video and include_audio,
        sufficient=has_sufficient_credits(balance, needed, is_admin),
    )


def validate_package(package_id: str, amount: float, credits: int) -> dict:
    """Checks a purchase request against the package table and returns the package."""
    package = CREDIT_PACKAGES.get(package_id)
    if package is None:
        raise InvalidPackageError(f"Unknown credit package: {package_id}", package_id)
    if package["price"] != amount or package["credits"] != credits:
        logger.warning(f"⚠️ Package mismatch for '{package_id}': {amount} / {credits}")
        raise InvalidPackageError("Package price or credits do not match", package_id)
    return package
