import logging
from typing import List, Tuple

from src.core.models import SceneCategory

logger = logging.getLogger("SceneEngine")

# Checked in order, first match wins. Beverages sit first so that
# "مشروب الطاقة" lands in commercial rather than kitchen.
CATEGORY_RULES: List[Tuple[SceneCategory, Tuple[str, ...]]] = [
    (SceneCategory.COMMERCIAL, ("مشروب", "طاقة", "energy", "drink", "beverage", "sting")),
    (SceneCategory.LIVING_ROOM, ("أريكة", "sofa", "معيشة", "أثاث")),
    (SceneCategory.BEDROOM, ("سرير", "bed", "نوم")),
    (SceneCategory.OFFICE, ("مكتب", "office", "كرسي")),
    (SceneCategory.KITCHEN, ("عصير", "ماء", "coca", "pepsi", "coffee", "tea", "قهوة")),
    (SceneCategory.DINING_ROOM, ("طعام", "food", "أكل", "وجبة")),
    (SceneCategory.DINING_ROOM, ("إضاءة", "ثريا", "lighting", "lamp")),
    (SceneCategory.OFFICE, ("إلكترونيات", "electronics", "هاتف", "phone", "حاسوب", "computer", "تقنية")),
    (SceneCategory.BATHROOM, ("تجميل", "cosmetics", "عطر", "perfume", "مكياج", "makeup", "شامبو")),
    (SceneCategory.BEDROOM, ("ملابس", "clothing", "أزياء", "fashion", "حقيبة", "bag", "حذاء")),
    (SceneCategory.KITCHEN, ("مطبخ", "kitchen")),
    (SceneCategory.BATHROOM, ("حمام", "bathroom")),
]

DEFAULT_CATEGORY = SceneCategory.STUDIO


def category_for_product_type(product_type: str) -> SceneCategory:
    """Maps a free-text product type onto a room category."""
    lowered = (product_type or "").lower()
    for category, needles in CATEGORY_RULES:
        if any(needle in lowered for needle in needles):
            return category
    return DEFAULT_CATEGORY
