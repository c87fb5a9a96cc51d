from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.models import CatalogScene, SceneCandidate


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SceneCategoryName(str, Enum):
    LIVING_ROOM = "living_room"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    OFFICE = "office"
    BATHROOM = "bathroom"
    DINING_ROOM = "dining_room"
    COMMERCIAL = "commercial"
    STUDIO = "studio"


class ContentTypeName(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class SceneSearchRequest(CamelModel):
    product_type: Optional[str] = None
    product_style: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    max_results: Optional[int] = Field(default=None, ge=1)


class SceneResponse(CamelModel):
    id: str
    title: str
    description: str
    image_url: str
    source_url: str
    category: SceneCategoryName
    keywords: List[str]
    is_synthetic: bool
    source: str
    author: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: SceneCandidate) -> "SceneResponse":
        return cls(
            id=candidate.id,
            title=candidate.title,
            description=candidate.description,
            image_url=candidate.image_url,
            source_url=candidate.source_url,
            category=SceneCategoryName(candidate.category.value),
            keywords=candidate.keywords,
            is_synthetic=candidate.is_synthetic,
            source=candidate.source,
            author=candidate.author,
        )


class SceneSearchResponse(CamelModel):
    total: int
    is_synthetic: bool
    scenes: List[SceneResponse]


class CatalogSceneResponse(CamelModel):
    id: str
    name: str
    description: str
    category: str
    style: str
    keywords: List[str]
    lighting: str
    colors: List[str]
    image_url: Optional[str] = None

    @classmethod
    def from_scene(cls, scene: CatalogScene) -> "CatalogSceneResponse":
        return cls(
            id=scene.id,
            name=scene.name,
            description=scene.description,
            category=scene.category,
            style=scene.style,
            keywords=scene.keywords,
            lighting=scene.lighting,
            colors=scene.colors,
            image_url=scene.image_url,
        )


class CatalogStatsResponse(CamelModel):
    total_scenes: int
    categories_count: int
    categories: Dict[str, int]


class EnhanceUrlRequest(CamelModel):
    image_url: str


class EnhanceUrlResponse(CamelModel):
    original_url: str
    image_url: str


class CreditQuoteRequest(CamelModel):
    content_type: ContentTypeName
    video_duration_seconds: Optional[int] = Field(default=None, ge=1)
    include_audio: bool = False
    balance: int = Field(default=0, ge=0)
    is_admin: bool = False


class CreditQuoteResponse(CamelModel):
    credits_needed: int
    content_type: ContentTypeName
    is_short_video: bool
    includes_audio: bool
    sufficient: bool


class CreditPackageResponse(CamelModel):
    id: str
    name: str
    credits: int
    price: float
    type: str = "one_time"


class PackagePurchaseRequest(CamelModel):
    package_id: str
    amount: float = Field(ge=0)
    credits: int = Field(ge=0)
