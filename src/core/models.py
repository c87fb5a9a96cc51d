from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SceneCategory(Enum):
    LIVING_ROOM = "living_room"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    OFFICE = "office"
    BATHROOM = "bathroom"
    DINING_ROOM = "dining_room"
    COMMERCIAL = "commercial"
    STUDIO = "studio"


class SourceErrorKind(Enum):
    UNAVAILABLE = "unavailable"
    MALFORMED_RESPONSE = "malformed_response"


class ContentType(Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class SourceProfile:
    name: str
    max_results: int
    is_live: bool


@dataclass(frozen=True)
class SceneQuery:
    product_type: str = "أثاث"
    product_style: str = "modern"
    keywords: List[str] = field(default_factory=list)
    max_results: int = 24

    def search_text(self) -> str:
        """Live search text: the first keyword wins, else a synthesized CGI query."""
        if self.keywords:
            return self.keywords[0]
        return f"{self.product_type} {self.product_style} cgi 3d render".strip()


@dataclass(frozen=True)
class RawScene:
    """A scene as a source returned it, before normalisation."""
    id: str
    title: str
    description: str
    image_url: str
    source_url: str
    author: Optional[str] = None
    is_synthetic: bool = False


@dataclass(frozen=True)
class SceneCandidate:
    id: str
    title: str
    description: str
    image_url: str
    source_url: str
    category: SceneCategory
    keywords: List[str]
    is_synthetic: bool
    source: str
    author: Optional[str] = None


@dataclass(frozen=True)
class SourceError:
    kind: SourceErrorKind
    message: str


@dataclass(frozen=True)
class SourceResult:
    source: str
    scenes: List[RawScene] = field(default_factory=list)
    error: Optional[SourceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, scenes: List[RawScene]) -> "SourceResult":
        return cls(source=source, scenes=list(scenes))

    @classmethod
    def failure(cls, source: str, kind: SourceErrorKind, message: str) -> "SourceResult":
        return cls(source=source, error=SourceError(kind=kind, message=message))


@dataclass(frozen=True)
class CatalogScene:
    id: str
    name: str
    description: str
    category: str
    style: str
    keywords: List[str]
    lighting: str
    colors: List[str]
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CreditQuote:
    credits_needed: int
    content_type: ContentType
    is_short_video: bool
    includes_audio: bool
    sufficient: bool
