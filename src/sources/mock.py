import hashlib
import logging
import math
from typing import List, Optional, Sequence

from src.core.models import RawScene, SceneQuery, SourceProfile, SourceResult
from src.sources.base import SceneSource

logger = logging.getLogger("SceneEngine")

STOCK_SCENE_URLS = [
    "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1618221195710-dd6b41faaea6?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1600210492486-724fe5c67fb0?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1600585154340-be6161a56a0c?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1616486338812-3dadae4b4ace?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1556912173-3bb406ef7e77?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1497366216548-37526070297c?w=1920&h=1080&fit=crop&fm=webp&q=90",
    "https://images.unsplash.com/photo-1552321554-5fefe8c9ef14?w=1920&h=1080&fit=crop&fm=webp&q=90",
]

STYLE_LABELS = ["Modern", "Minimalist", "Luxury", "Scandinavian", "Industrial", "Classic"]
THEME_LABELS = ["Studio Setup", "Showroom", "Lifestyle Scene", "Gallery Display"]


class MockSceneSource(SceneSource):
    """
    Deterministic synthetic scenes. The last link of every chain: never fails,
    never returns empty.
    """

    profile = SourceProfile(name="synthetic", max_results=48, is_live=False)

    def __init__(
        self,
        stock_urls: Optional[Sequence[str]] = None,
        styles: Optional[Sequence[str]] = None,
        themes: Optional[Sequence[str]] = None,
    ):
        self.stock_urls = list(stock_urls if stock_urls is not None else STOCK_SCENE_URLS)
        styles = list(styles if styles is not None else STYLE_LABELS)
        themes = list(themes if themes is not None else THEME_LABELS)

        if not self.stock_urls:
            raise ValueError("Synthetic source needs at least one stock image URL")
        if not styles or not themes:
            raise ValueError("Synthetic source needs at least one style and one theme label")

        # Interleave so consecutive scenes differ in both style and theme
        self.labels = [f"{styles[i % len(styles)]} {themes[i % len(themes)]}"
                       for i in range(math.lcm(len(styles), len(themes)))]

    def search(self, query: SceneQuery, limit: int) -> SourceResult:
        count = max(1, self.capped(limit))
        product = query.product_type or "Product"
        product_hash = hashlib.md5(product.encode("utf-8")).hexdigest()[:6]

        scenes: List[RawScene] = []
        for i in range(count):
            label = self.labels[i % len(self.labels)]
            scenes.append(
                RawScene(
                    id=f"synthetic_{product_hash}_{i + 1}",
                    title=f"{label} - {product}",
                    description=f"CGI 3d render of {product} in a {label.lower()} setting",
                    image_url=self.stock_urls[i % len(self.stock_urls)],
                    source_url="#",
                    author="CGI Studio",
                    is_synthetic=True,
                )
            )

        logger.info(f"🧪 Generated {len(scenes)} synthetic scenes for '{product}'.")
        return SourceResult.success(self.profile.name, scenes)
