import asyncio
from unittest.mock import MagicMock

import pytest

from src.config.settings import Settings
from src.core.models import RawScene, SceneCategory, SourceErrorKind, SourceProfile, SourceResult
from src.engine.image_urls import ImageUrlNormalizer
from src.pipeline.acquisition import SceneAcquisition, build_acquisition, build_sources
from src.sources.base import SceneSource
from src.sources.catalog import CatalogSceneSource
from src.sources.live import PinterestSceneSource, UnsplashSceneSource
from src.sources.mock import MockSceneSource

VALID_CATEGORIES = {c.value for c in SceneCategory}


class StaticLiveSource(SceneSource):
    """Live source double returning canned scenes."""
    profile = SourceProfile(name="static-live", max_results=30, is_live=True)

    def __init__(self, scenes=None, error=None):
        self.scenes = scenes or []
        self.error = error
        self.calls = 0

    def search(self, query, limit):
        self.calls += 1
        if self.error:
            return SourceResult.failure(self.profile.name, self.error, "down")
        return SourceResult.success(self.profile.name, self.scenes[:limit])


class ExplodingSource(SceneSource):
    profile = SourceProfile(name="exploding", max_results=10, is_live=True)

    def search(self, query, limit):
        raise RuntimeError("should have returned a failure result")


def live_scene(scene_id, title, description="", image_url=None):
    return RawScene(
        id=scene_id,
        title=title,
        description=description,
        image_url=image_url if image_url is not None else f"https://images.unsplash.com/{scene_id}",
        source_url=f"https://unsplash.com/photos/{scene_id}",
    )


def fake_http_session(status_code=200, json_data=None):
    session = MagicMock()
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "error" if status_code >= 400 else ""
    resp.json.return_value = json_data
    session.get.return_value = resp
    return session


def assert_scene_invariants(scenes, max_results):
    assert 0 <= len(scenes) <= max_results
    for scene in scenes:
        assert scene.image_url
        assert scene.category.value in VALID_CATEGORIES
        assert len(scene.keywords) <= 5
        assert len(set(scene.keywords)) == len(scene.keywords)


def test_scenario_a_sofa_without_live_source():
    engine = SceneAcquisition(sources=[MockSceneSource()])

    scenes = engine.acquire(product_type="أريكة", keywords=[], max_results=5)

    assert len(scenes) == 5
    assert all(s.category == SceneCategory.LIVING_ROOM for s in scenes)
    assert all(s.is_synthetic for s in scenes)
    assert_scene_invariants(scenes, 5)


def test_scenario_b_lighting_maps_to_dining_room():
    live = StaticLiveSource([live_scene("l1", "Chandelier over a table")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    live_scenes = engine.acquire(product_type="إضاءة")
    synthetic_scenes = SceneAcquisition(sources=[MockSceneSource()]).acquire(product_type="إضاءة")

    assert [s.category for s in live_scenes] == [SceneCategory.DINING_ROOM]
    assert {s.category for s in synthetic_scenes} == {SceneCategory.DINING_ROOM}


def test_scenario_c_live_http_500_falls_back_silently():
    session = fake_http_session(status_code=500)
    engine = SceneAcquisition(sources=[UnsplashSceneSource("key", session=session), MockSceneSource()])

    scenes = engine.acquire(product_type="sofa", keywords=["velvet"], max_results=8)

    assert session.get.called
    assert len(scenes) == 8
    assert all(s.is_synthetic for s in scenes)
    assert_scene_invariants(scenes, 8)


def test_live_zero_results_yields_only_synthetic():
    engine = SceneAcquisition(sources=[StaticLiveSource([]), MockSceneSource()])
    scenes = engine.acquire(product_type="sofa")
    assert scenes
    assert all(s.is_synthetic for s in scenes)


def test_live_results_win_when_present():
    live = StaticLiveSource([live_scene("a", "Velvet sofa 3d render"), live_scene("b", "Grey sofa")])
    mock = MagicMock(wraps=MockSceneSource())
    mock.profile = MockSceneSource.profile
    mock.capped = MockSceneSource().capped
    engine = SceneAcquisition(sources=[live, mock])

    scenes = engine.acquire(product_type="sofa")

    assert [s.id for s in scenes] == ["a", "b"]
    assert not any(s.is_synthetic for s in scenes)
    assert all(s.source == "static-live" for s in scenes)
    mock.search.assert_not_called()


def test_relevance_filter_applies_to_live_results():
    live = StaticLiveSource([
        live_scene("match", "Velvet armchair"),
        live_scene("miss", "Mountain lake"),
    ])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="chair", keywords=["velvet"])

    assert [s.id for s in scenes] == ["match"]


def test_relevance_filter_skipped_when_nothing_matches():
    live = StaticLiveSource([live_scene("x", "Mountain lake"), live_scene("y", "City skyline")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="chair", keywords=["velvet"])

    assert {s.id for s in scenes} == {"x", "y"}
    assert not any(s.is_synthetic for s in scenes)


def test_live_results_ranked_by_product_type():
    live = StaticLiveSource([
        live_scene("generic", "Empty loft"),
        live_scene("sofa", "Sofa in a loft"),
    ])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="sofa")

    assert [s.id for s in scenes] == ["sofa", "generic"]


def test_bad_candidate_dropped_not_batch():
    live = StaticLiveSource([
        live_scene("good", "Sofa render"),
        live_scene("no-image", "Sofa render", image_url=""),
        live_scene("ftp", "Sofa render", image_url="ftp://example.com/x.jpg"),
    ])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="sofa")

    assert [s.id for s in scenes] == ["good"]


def test_all_candidates_invalid_falls_through():
    live = StaticLiveSource([live_scene("no-image", "Sofa", image_url="")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="sofa", max_results=3)

    assert len(scenes) == 3
    assert all(s.is_synthetic for s in scenes)


def test_failed_source_result_falls_through():
    live = StaticLiveSource(error=SourceErrorKind.MALFORMED_RESPONSE)
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="sofa", max_results=2)

    assert live.calls == 1
    assert len(scenes) == 2


def test_source_that_raises_does_not_escape():
    engine = SceneAcquisition(sources=[ExplodingSource(), MockSceneSource()])
    scenes = engine.acquire(product_type="sofa", max_results=4)
    assert len(scenes) == 4


def test_every_source_empty_returns_empty_list():
    engine = SceneAcquisition(sources=[StaticLiveSource([]), StaticLiveSource(error=SourceErrorKind.UNAVAILABLE)])
    assert engine.acquire(product_type="sofa") == []


def test_result_capped_by_max_results_and_source_limit():
    live = StaticLiveSource([live_scene(f"s{i}", f"Sofa {i}") for i in range(30)])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    assert len(engine.acquire(product_type="sofa", max_results=7)) == 7
    assert len(engine.acquire(product_type="sofa", max_results=100)) == 30


def test_defaults_applied_for_missing_inputs():
    engine = SceneAcquisition(sources=[MockSceneSource()], default_max_results=24)

    scenes = engine.acquire(product_type=None, product_style=None, keywords=None, max_results=0)

    assert len(scenes) == 24
    # default product type is furniture
    assert scenes[0].category == SceneCategory.LIVING_ROOM


def test_keywords_merged_and_capped():
    live = StaticLiveSource([live_scene("a", "Velvet sofa cgi 3d render design mockup")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])

    scenes = engine.acquire(product_type="sofa", keywords=["velvet", "sofa"])

    keywords = scenes[0].keywords
    assert keywords[:2] == ["velvet", "sofa"]
    assert len(keywords) == 5
    assert len(set(keywords)) == 5


def test_urls_normalised_through_proxy():
    live = StaticLiveSource([live_scene("a", "Sofa", image_url="https://example.com/sofa.jpg")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()], normalizer=ImageUrlNormalizer(cloud_name="demo"))

    scenes = engine.acquire(product_type="sofa")

    assert scenes[0].image_url.startswith("https://res.cloudinary.com/demo/image/fetch/")


def test_duplicate_ids_collapsed():
    live = StaticLiveSource([live_scene("dup", "Sofa one"), live_scene("dup", "Sofa two")])
    engine = SceneAcquisition(sources=[live, MockSceneSource()])
    assert [s.title for s in engine.acquire(product_type="sofa")] == ["Sofa one"]


def test_acquire_async_matches_sync():
    engine = SceneAcquisition(sources=[MockSceneSource()])
    sync_scenes = engine.acquire(product_type="lamp", max_results=3)
    async_scenes = asyncio.run(engine.acquire_async(product_type="lamp", max_results=3))
    assert sync_scenes == async_scenes


def test_requires_a_source():
    with pytest.raises(ValueError):
        SceneAcquisition(sources=[])


# --- chain assembly ---

def test_build_sources_without_unsplash_key_uses_synthetic_only():
    sources = build_sources(Settings(live_source="unsplash", unsplash_access_key=None))
    assert [type(s) for s in sources] == [MockSceneSource]


def test_build_sources_with_unsplash_key():
    sources = build_sources(Settings(live_source="unsplash", unsplash_access_key="abc"))
    assert [type(s) for s in sources] == [UnsplashSceneSource, MockSceneSource]


def test_build_sources_pinterest_and_catalog():
    config = Settings(live_source="pinterest", enable_catalog_fallback=True)
    sources = build_sources(config)
    assert [type(s) for s in sources] == [PinterestSceneSource, CatalogSceneSource, MockSceneSource]


def test_build_sources_unknown_live_source_ignored():
    sources = build_sources(Settings(live_source="flickr"))
    assert [type(s) for s in sources] == [MockSceneSource]


def test_build_acquisition_wires_session_and_normalizer():
    session = fake_http_session(json_data={"results": [{
        "id": "p1",
        "alt_description": "sofa scene",
        "urls": {"regular": "https://images.unsplash.com/photo-p1"},
    }]})
    config = Settings(live_source="unsplash", unsplash_access_key="abc", cloudinary_cloud_name="demo")

    engine = build_acquisition(config, session=session)
    scenes = engine.acquire(product_type="sofa")

    assert engine.normalizer.cloud_name == "demo"
    assert [s.id for s in scenes] == ["unsplash_p1"]
    assert scenes[0].author is None
