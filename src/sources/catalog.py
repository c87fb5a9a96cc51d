import logging

from src.core.models import RawScene, SceneQuery, SourceProfile, SourceResult
from src.engine.catalog import SceneCatalog
from src.sources.base import SceneSource
from src.utils.decorators import source_guard

logger = logging.getLogger("SceneEngine")


class CatalogSceneSource(SceneSource):
    """Curated fallback: suggestions from the default scene catalog."""

    profile = SourceProfile(name="catalog", max_results=24, is_live=False)

    def __init__(self, catalog: SceneCatalog):
        self.catalog = catalog

    @source_guard
    def search(self, query: SceneQuery, limit: int) -> SourceResult:
        suggestions = self.catalog.suggest_for_product(
            query.product_type, query.product_style, query.keywords, limit=self.capped(limit)
        )
        scenes = [
            RawScene(
                id=f"catalog_{scene.id}",
                title=f"{scene.name} - CGI Scene",
                description=f"Professional CGI scene for {query.product_type} - {scene.description}",
                image_url=scene.image_url or "",
                source_url="#",
                author="CGI Studio",
                is_synthetic=True,
            )
            for scene in suggestions
        ]
        return SourceResult.success(self.profile.name, scenes)
