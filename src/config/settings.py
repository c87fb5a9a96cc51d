import os
from typing import List, Optional
from pydantic import BaseModel, Field

class Settings(BaseModel):
    # Scene Search
    live_source: str = Field(default="unsplash", description="Live search backend: unsplash, pinterest or none")
    search_timeout: float = Field(default=20.0, description="Seconds before a live source call is abandoned")
    default_max_results: int = Field(default=24, description="Scenes returned when the caller does not ask for a count")
    enable_catalog_fallback: bool = Field(default=False, description="Try the curated catalog before synthetic scenes")

    # Paths
    catalog_path: str = Field(default="config/scenes_catalog.json", description="Path to the default scenes catalog")

    # Image Normalisation
    cloudinary_cloud_name: Optional[str] = Field(default=None, description="Cloud used for fetch-proxy rewrites")
    target_width: int = Field(default=1920)
    target_height: int = Field(default=1080)
    target_format: str = Field(default="webp")
    target_quality: int = Field(default=90)
    direct_cdn_domains: List[str] = Field(
        default_factory=lambda: ["res.cloudinary.com", "cloudinary.com", "images.unsplash.com"],
        description="Hosts that already serve final assets and skip the proxy",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # API
    api_host: str = Field(default="0.0.0.0", description="API Host")
    api_port: int = Field(default=8000, description="API Port")

    # Live Sources
    unsplash_access_key: Optional[str] = Field(default=None)
    unsplash_api_url: str = Field(default="https://api.unsplash.com")
    pinterest_base_url: str = Field(default="https://www.pinterest.com")

    @staticmethod
    def _parse_bool(value: str) -> bool:
        if value.strip().lower() in {"1", "true", "yes", "on"}:
            return True
        if value.strip().lower() in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"Not a boolean: {value}")

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @staticmethod
    def load() -> "Settings":
        """
        Load settings from environment variables or defaults.
        Values that fail to parse keep their default.
        """
        overrides = {}

        env_map = {
            "SCENE_LIVE_SOURCE": ("live_source", str),
            "SCENE_SEARCH_TIMEOUT": ("search_timeout", float),
            "SCENE_DEFAULT_MAX_RESULTS": ("default_max_results", int),
            "SCENE_ENABLE_CATALOG_FALLBACK": ("enable_catalog_fallback", Settings._parse_bool),
            "SCENE_CATALOG_PATH": ("catalog_path", str),
            "SCENE_TARGET_WIDTH": ("target_width", int),
            "SCENE_TARGET_HEIGHT": ("target_height", int),
            "SCENE_TARGET_FORMAT": ("target_format", str),
            "SCENE_TARGET_QUALITY": ("target_quality", int),
            "SCENE_DIRECT_CDN_DOMAINS": ("direct_cdn_domains", Settings._parse_list),
            "SCENE_LOG_LEVEL": ("log_level", str),
            "SCENE_API_HOST": ("api_host", str),
            "SCENE_API_PORT": ("api_port", int),
            "CLOUDINARY_CLOUD_NAME": ("cloudinary_cloud_name", str),
            "UNSPLASH_ACCESS_KEY": ("unsplash_access_key", str),
            "UNSPLASH_API_URL": ("unsplash_api_url", str),
            "PINTEREST_BASE_URL": ("pinterest_base_url", str),
        }

        for env_var, (field, type_) in env_map.items():
            val = os.getenv(env_var)
            if val is not None:
                try:
                    overrides[field] = type_(val)
                except ValueError:
                    pass # Keep default if parse fails

        return Settings(**overrides)

# Global settings instance
settings = Settings.load()
