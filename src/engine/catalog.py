import json
import logging
from typing import Dict, List, Optional, Sequence

from src.core.exceptions import CatalogError
from src.core.models import CatalogScene

logger = logging.getLogger("SceneEngine")

# Which catalog categories suit a product. Matched as substrings of the
# product type or of any caller keyword.
PRODUCT_CATEGORY_MAP: Dict[str, List[str]] = {
    "أثاث": ["living_room", "bedroom", "office"],
    "أريكة": ["living_room"],
    "سرير": ["bedroom"],
    "مكتب": ["office"],
    "طاولة": ["living_room", "office", "kitchen"],
    "كرسي": ["living_room", "office", "bedroom"],
    "خزانة": ["bedroom", "kitchen", "office"],
    "إضاءة": ["living_room", "bedroom", "kitchen", "office"],
    "ديكور": ["living_room", "bedroom", "office"],
    "مطبخ": ["kitchen"],
    "حمام": ["bathroom"],
    "نباتات": ["living_room", "office"],
    "تلفزيون": ["living_room", "bedroom"],
    "كمبيوتر": ["office", "bedroom"],
    "لابتوب": ["office", "bedroom"],
    "مشروب": ["kitchen", "dining_room"],
    "طاقة": ["kitchen", "office"],
    "عصير": ["kitchen", "dining_room"],
    "قهوة": ["kitchen", "office"],
    "شاي": ["kitchen", "living_room"],
    "ماء": ["kitchen", "office"],
    "طعام": ["kitchen", "dining_room"],
    "أكل": ["kitchen", "dining_room"],
    "إلكترونيات": ["office", "living_room"],
    "هاتف": ["office", "bedroom"],
    "تقنية": ["office"],
    "تجميل": ["bedroom", "bathroom"],
    "عطر": ["bedroom", "bathroom"],
    "مكياج": ["bedroom", "bathroom"],
    "شامبو": ["bathroom"],
    "ملابس": ["bedroom"],
    "أزياء": ["bedroom"],
    "حقيبة": ["bedroom", "office"],
    "حذاء": ["bedroom"],
}

DEFAULT_SUGGESTED_CATEGORIES = ["living_room", "bedroom", "office"]
CATEGORY_PRIORITY = ["living_room", "bedroom", "kitchen", "office"]

STYLE_FAMILIES = {
    "modern": ("modern", "contemporary", "minimalist"),
    "classic": ("classic", "traditional", "luxury"),
    "cozy": ("cozy", "warm", "comfortable"),
}


class SceneCatalog:
    """
    The curated library of default scenes shipped with the service.

    Loaded once per instance from a JSON file of the form
    {"version": ..., "categories": {id: {"name", "description", "scenes": [...]}}}.
    """

    def __init__(self, path: str, strict: bool = True):
        self.path = path
        self.strict = strict
        raw = self._load_json(path)
        self.version = raw.get("version", "unknown")
        self.categories = self._parse_categories(raw.get("categories", {}))
        logger.info(
            f"📚 Scene catalog v{self.version} loaded: "
            f"{len(self.all_scenes())} scenes in {len(self.categories)} categories"
        )

    def _load_json(self, path: str) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            if self.strict:
                raise CatalogError(f"Cannot load scene catalog {path}: {e}")
            logger.warning(f"⚠️ Scene catalog unavailable ({e}), continuing with an empty library.")
            return {}

    def _parse_categories(self, categories: dict) -> Dict[str, List[CatalogScene]]:
        parsed: Dict[str, List[CatalogScene]] = {}
        for category_id, body in categories.items():
            scenes = []
            for item in body.get("scenes", []):
                try:
                    scenes.append(
                        CatalogScene(
                            id=item["id"],
                            name=item["name"],
                            description=item.get("description", ""),
                            category=item.get("category", category_id),
                            style=item.get("style", ""),
                            keywords=list(item.get("keywords", [])),
                            lighting=item.get("lighting", ""),
                            colors=list(item.get("colors", [])),
                            image_url=item.get("imageUrl"),
                        )
                    )
                except KeyError as e:
                    if self.strict:
                        raise CatalogError(f"❌ Malformed catalog scene in '{category_id}': missing {e}")
                    logger.warning(f"⚠️ Skipping catalog scene in '{category_id}': missing {e}")
            parsed[category_id] = scenes
        return parsed

    def all_scenes(self) -> List[CatalogScene]:
        return [scene for scenes in self.categories.values() for scene in scenes]

    def scenes_by_category(self, category_id: str) -> List[CatalogScene]:
        if category_id not in self.categories:
            raise CatalogError(f"Category not found: {category_id}", code=404)
        return list(self.categories[category_id])

    def search(self, query: str) -> List[CatalogScene]:
        """Free-text search, best match first. A blank query lists everything."""
        if not query or not query.strip():
            return self.all_scenes()

        terms = query.lower().split()
        scored = []
        for scene in self.all_scenes():
            score = 0
            for term in terms:
                if term in scene.name.lower():
                    score += 10
                if term in scene.category.lower():
                    score += 8
                if term in scene.style.lower():
                    score += 7
                if term in scene.description.lower():
                    score += 5
                score += 6 * sum(1 for k in scene.keywords if term in k.lower())
                score += 3 * sum(1 for c in scene.colors if term in c.lower())
            if score > 0:
                scored.append((score, scene))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [scene for _, scene in scored]

    def suggested_categories(self, product_type: str, keywords: Sequence[str] = ()) -> List[str]:
        categories: List[str] = []
        for product, mapped in PRODUCT_CATEGORY_MAP.items():
            if product in (product_type or "") or any(product in k for k in keywords):
                categories.extend(mapped)
        if not categories:
            categories = list(DEFAULT_SUGGESTED_CATEGORIES)
        return list(dict.fromkeys(categories))

    def suggest_for_product(
        self,
        product_type: str,
        product_style: str = "modern",
        keywords: Sequence[str] = (),
        limit: int = 8,
    ) -> List[CatalogScene]:
        categories = self.suggested_categories(product_type, keywords)
        logger.info(f"📂 Suggested categories for '{product_type}': {categories}")

        suggested: List[CatalogScene] = []
        for category_id in categories:
            if category_id not in self.categories:
                logger.debug(f"Catalog has no '{category_id}' category, skipping.")
                continue
            suggested.extend(self.categories[category_id])

        # Scenes in the requested style family float up; others still qualify
        family = STYLE_FAMILIES.get((product_style or "").lower(), ())
        suggested.sort(key=lambda s: (
            CATEGORY_PRIORITY.index(s.category) if s.category in CATEGORY_PRIORITY else 99,
            0 if any(f in s.style.lower() for f in family) else 1,
        ))
        return suggested[:limit]

    def stats(self) -> dict:
        per_category = {key: len(scenes) for key, scenes in self.categories.items()}
        return {
            "total_scenes": sum(per_category.values()),
            "categories_count": len(per_category),
            "categories": per_category,
        }
