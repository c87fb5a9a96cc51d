from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import (
    CatalogSceneResponse,
    CatalogStatsResponse,
    CreditPackageResponse,
    CreditQuoteRequest,
    CreditQuoteResponse,
    ContentTypeName,
    EnhanceUrlRequest,
    EnhanceUrlResponse,
    PackagePurchaseRequest,
    SceneResponse,
    SceneSearchRequest,
    SceneSearchResponse,
)
from src.config.settings import settings
from src.core.exceptions import CandidateProcessingError, SceneEngineError
from src.core.models import ContentType
from src.engine import credits
from src.engine.catalog import SceneCatalog
from src.engine.image_urls import ImageUrlNormalizer
from src.pipeline.acquisition import SceneAcquisition, build_acquisition
from src.utils.logger import setup_logging

logger = setup_logging(settings.log_level)

# Single instances, built from settings
catalog = SceneCatalog(settings.catalog_path, strict=False)
acquisition = build_acquisition(settings, catalog=catalog)
normalizer = ImageUrlNormalizer.from_settings(settings)

app = FastAPI(
    title="CGI Scene Engine API",
    description="Scene search, curated scene catalog and credit pricing for CGI product renders",
    version="1.0.0",
)


def get_acquisition() -> SceneAcquisition:
    return acquisition


def get_catalog() -> SceneCatalog:
    return catalog


def get_normalizer() -> ImageUrlNormalizer:
    return normalizer


# Domain errors carry their own status code
@app.exception_handler(SceneEngineError)
async def scene_engine_exception_handler(request: Request, exc: SceneEngineError):
    logger.warning(f"Request failed: {exc.message}")
    return JSONResponse(
        status_code=exc.code,
        content={"error": exc.message, "detail": exc.details},
    )


# Global Error Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "detail": str(exc)},
    )

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/scenes/search", response_model=SceneSearchResponse)
async def search_scenes(request: SceneSearchRequest, engine: SceneAcquisition = Depends(get_acquisition)):
    """
    Scene candidates for a product. Source outages fall back to synthetic
    scenes instead of failing the request.
    """
    candidates = await engine.acquire_async(
        product_type=request.product_type,
        product_style=request.product_style,
        keywords=request.keywords,
        max_results=request.max_results,
    )
    scenes = [SceneResponse.from_candidate(c) for c in candidates]
    return SceneSearchResponse(
        total=len(scenes),
        is_synthetic=bool(scenes) and all(s.is_synthetic for s in scenes),
        scenes=scenes,
    )


@app.get("/api/scenes/default", response_model=List[CatalogSceneResponse])
def list_default_scenes(
    product_type: Optional[str] = Query(default=None, alias="productType"),
    scene_catalog: SceneCatalog = Depends(get_catalog),
):
    if product_type:
        logger.info(f"🎯 Suggested default scenes for '{product_type}'")
        scenes = scene_catalog.suggest_for_product(product_type)
    else:
        scenes = scene_catalog.all_scenes()
    return [CatalogSceneResponse.from_scene(s) for s in scenes]


@app.get("/api/scenes/default/search", response_model=List[CatalogSceneResponse])
def search_default_scenes(q: str = "", scene_catalog: SceneCatalog = Depends(get_catalog)):
    return [CatalogSceneResponse.from_scene(s) for s in scene_catalog.search(q)]


@app.get("/api/scenes/default/stats", response_model=CatalogStatsResponse)
def default_scene_stats(scene_catalog: SceneCatalog = Depends(get_catalog)):
    return CatalogStatsResponse(**scene_catalog.stats())


@app.get("/api/scenes/default/{category_id}", response_model=List[CatalogSceneResponse])
def default_scenes_by_category(category_id: str, scene_catalog: SceneCatalog = Depends(get_catalog)):
    return [CatalogSceneResponse.from_scene(s) for s in scene_catalog.scenes_by_category(category_id)]


@app.post("/api/scenes/enhance-url", response_model=EnhanceUrlResponse)
def enhance_scene_url(request: EnhanceUrlRequest, url_normalizer: ImageUrlNormalizer = Depends(get_normalizer)):
    try:
        image_url = url_normalizer.normalize(request.image_url)
    except CandidateProcessingError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return EnhanceUrlResponse(original_url=request.image_url, image_url=image_url)


@app.get("/api/credits/packages", response_model=List[CreditPackageResponse])
def list_credit_packages():
    return [
        CreditPackageResponse(
            id=package_id,
            name=package["name"],
            credits=package["credits"],
            price=package["price"],
            type=package.get("type", "one_time"),
        )
        for package_id, package in credits.CREDIT_PACKAGES.items()
    ]


@app.post("/api/credits/validate", response_model=CreditPackageResponse)
def validate_credit_package(request: PackagePurchaseRequest):
    """Checks a purchase against the package table; a mismatch is a 400."""
    package = credits.validate_package(request.package_id, request.amount, request.credits)
    return CreditPackageResponse(
        id=request.package_id,
        name=package["name"],
        credits=package["credits"],
        price=package["price"],
        type=package.get("type", "one_time"),
    )


@app.post("/api/credits/quote", response_model=CreditQuoteResponse)
def quote_credits(request: CreditQuoteRequest):
    result = credits.quote(
        ContentType(request.content_type.value),
        video_duration_seconds=request.video_duration_seconds,
        include_audio=request.include_audio,
        balance=request.balance,
        is_admin=request.is_admin,
    )
    return CreditQuoteResponse(
        credits_needed=result.credits_needed,
        content_type=ContentTypeName(result.content_type.value),
        is_short_video=result.is_short_video,
        includes_audio=result.includes_audio,
        sufficient=result.sufficient,
    )


@app.get("/api/health")
def health_check(engine: SceneAcquisition = Depends(get_acquisition)):
    return {
        "status": "CGI Scene Engine API is running",
        "sources": [s.profile.name for s in engine.sources],
    }
