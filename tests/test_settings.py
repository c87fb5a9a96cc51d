import os
from unittest.mock import patch

from src.config.settings import Settings


def test_defaults():
    with patch.dict(os.environ, {}, clear=True):
        config = Settings.load()
    assert config.live_source == "unsplash"
    assert config.default_max_results == 24
    assert config.search_timeout == 20.0
    assert config.enable_catalog_fallback is False
    assert config.cloudinary_cloud_name is None
    assert "images.unsplash.com" in config.direct_cdn_domains


def test_env_overrides():
    env = {
        "SCENE_LIVE_SOURCE": "pinterest",
        "SCENE_DEFAULT_MAX_RESULTS": "12",
        "SCENE_ENABLE_CATALOG_FALLBACK": "yes",
        "SCENE_DIRECT_CDN_DOMAINS": "cdn.example.com, images.unsplash.com",
        "CLOUDINARY_CLOUD_NAME": "demo",
        "UNSPLASH_ACCESS_KEY": "abc",
    }
    with patch.dict(os.environ, env, clear=True):
        config = Settings.load()

    assert config.live_source == "pinterest"
    assert config.default_max_results == 12
    assert config.enable_catalog_fallback is True
    assert config.direct_cdn_domains == ["cdn.example.com", "images.unsplash.com"]
    assert config.cloudinary_cloud_name == "demo"
    assert config.unsplash_access_key == "abc"


def test_unparsable_values_keep_defaults():
    env = {"SCENE_SEARCH_TIMEOUT": "soon", "SCENE_ENABLE_CATALOG_FALLBACK": "maybe"}
    with patch.dict(os.environ, env, clear=True):
        config = Settings.load()
    assert config.search_timeout == 20.0
    assert config.enable_catalog_fallback is False
