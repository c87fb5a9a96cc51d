import asyncio
from typing import List, Optional, Sequence

import requests

from src.config.settings import Settings, settings as default_settings
from src.core.exceptions import CandidateProcessingError
from src.core.models import RawScene, SceneCandidate, SceneCategory, SceneQuery, SourceResult
from src.engine.categorizer import category_for_product_type
from src.engine.catalog import SceneCatalog
from src.engine.image_urls import ImageUrlNormalizer
from src.engine.keywords import extract_keywords, merge_keywords
from src.engine.relevance import filter_by_relevance, rank_by_relevance
from src.sources.base import SceneSource
from src.sources.catalog import CatalogSceneSource
from src.sources.live import PinterestSceneSource, UnsplashSceneSource
from src.sources.mock import MockSceneSource
from src.utils.logger import get_logger

logger = get_logger()


class SceneAcquisition:
    """
    Finds scene candidates for a product by walking an ordered chain of sources.

    The first source that yields at least one valid candidate wins. Source
    failures come back as failed SourceResults and simply move the chain on;
    nothing raises to the caller.
    """

    def __init__(
        self,
        sources: Sequence[SceneSource],
        normalizer: Optional[ImageUrlNormalizer] = None,
        default_max_results: int = 24,
    ):
        if not sources:
            raise ValueError("SceneAcquisition needs at least one source")
        self.sources = list(sources)
        self.normalizer = normalizer or ImageUrlNormalizer()
        self.default_max_results = default_max_results

    def acquire(
        self,
        product_type: Optional[str] = None,
        product_style: Optional[str] = None,
        keywords: Optional[List[str]] = None,
        max_results: Optional[int] = None,
    ) -> List[SceneCandidate]:
        query = self._build_query(product_type, product_style, keywords, max_results)
        logger.info(
            f"🎯 Scene search: type='{query.product_type}' style='{query.product_style}' "
            f"keywords={query.keywords[:3]} max={query.max_results}"
        )

        category = category_for_product_type(query.product_type)

        for source in self.sources:
            limit = source.capped(query.max_results)
            try:
                result = source.search(query, limit)
            except Exception as e:
                # sources are expected to return failures, not raise them
                logger.error(f"❌ Source '{source.profile.name}' raised: {e}", exc_info=True)
                continue

            if not result.ok:
                logger.warning(f"🔄 '{source.profile.name}' unavailable ({result.error.kind.value}), trying next source.")
                continue

            candidates = self._post_process(result, query, category)
            if not candidates:
                logger.info(f"🔄 '{source.profile.name}' produced no usable scenes, trying next source.")
                continue

            if source.profile.is_live:
                candidates = filter_by_relevance(candidates, query.keywords)
                candidates = rank_by_relevance(candidates, query.product_type, query.product_style, query.keywords)

            candidates = candidates[:min(query.max_results, limit)]
            logger.info(
                f"🏁 Scene search complete | Source: {source.profile.name} | "
                f"Scenes: {len(candidates)} | Category: {category.value}"
            )
            return candidates

        logger.critical("🔥 Every scene source came back empty. Check the synthetic source configuration.")
        return []

    async def acquire_async(
        self,
        product_type: Optional[str] = None,
        product_style: Optional[str] = None,
        keywords: Optional[List[str]] = None,
        max_results: Optional[int] = None,
    ) -> List[SceneCandidate]:
        """Runs the blocking chain in a worker thread."""
        return await asyncio.to_thread(self.acquire, product_type, product_style, keywords, max_results)

    def _build_query(self, product_type, product_style, keywords, max_results) -> SceneQuery:
        defaults = SceneQuery()
        cleaned = [k.strip() for k in (keywords or []) if isinstance(k, str) and k.strip()]
        if not isinstance(max_results, int) or max_results < 1:
            max_results = self.default_max_results
        return SceneQuery(
            product_type=(product_type or "").strip() or defaults.product_type,
            product_style=(product_style or "").strip() or defaults.product_style,
            keywords=cleaned,
            max_results=max_results,
        )

    def _post_process(self, result: SourceResult, query: SceneQuery, category: SceneCategory) -> List[SceneCandidate]:
        candidates: List[SceneCandidate] = []
        seen_ids = set()
        for raw in result.scenes:
            try:
                candidate = self._to_candidate(raw, result.source, query, category)
            except CandidateProcessingError as e:
                logger.debug(f"Dropping scene {raw.id}: {e.message}")
                continue
            except Exception as e:
                logger.warning(f"⚠️ Dropping scene {raw.id}, post-processing failed: {e}")
                continue

            if candidate.id in seen_ids:
                logger.debug(f"Dropping duplicate scene id {candidate.id}")
                continue
            seen_ids.add(candidate.id)
            candidates.append(candidate)
        return candidates

    def _to_candidate(self, raw: RawScene, source_name: str, query: SceneQuery,
                      category: SceneCategory) -> SceneCandidate:
        image_url = self.normalizer.normalize(raw.image_url)
        extracted = extract_keywords(raw.title, raw.description, query.keywords)
        return SceneCandidate(
            id=raw.id,
            title=raw.title,
            description=raw.description,
            image_url=image_url,
            source_url=raw.source_url or "#",
            category=category,
            keywords=merge_keywords(query.keywords, extracted),
            is_synthetic=raw.is_synthetic,
            source=source_name,
            author=raw.author,
        )


def build_sources(config: Settings, session: Optional[requests.Session] = None,
                  catalog: Optional[SceneCatalog] = None) -> List[SceneSource]:
    """Assembles the source chain the configuration asks for."""
    sources: List[SceneSource] = []
    live = (config.live_source or "none").lower()

    if live == "unsplash":
        if config.unsplash_access_key:
            sources.append(UnsplashSceneSource(
                access_key=config.unsplash_access_key,
                session=session,
                api_url=config.unsplash_api_url,
                timeout=config.search_timeout,
            ))
        else:
            logger.warning("⚠️ No Unsplash access key found, live scene search disabled.")
    elif live == "pinterest":
        sources.append(PinterestSceneSource(
            session=session,
            base_url=config.pinterest_base_url,
            timeout=config.search_timeout,
        ))
    elif live != "none":
        logger.warning(f"⚠️ Unknown live source '{config.live_source}', live scene search disabled.")

    if config.enable_catalog_fallback:
        sources.append(CatalogSceneSource(catalog or SceneCatalog(config.catalog_path, strict=False)))

    sources.append(MockSceneSource())
    return sources


def build_acquisition(config: Optional[Settings] = None, session: Optional[requests.Session] = None,
                      catalog: Optional[SceneCatalog] = None) -> SceneAcquisition:
    config = config or default_settings
    return SceneAcquisition(
        sources=build_sources(config, session=session, catalog=catalog),
        normalizer=ImageUrlNormalizer.from_settings(config),
        default_max_results=config.default_max_results,
    )
