import html
import logging
import re
from typing import List, Optional
from urllib.parse import quote

import requests

from src.core.exceptions import MalformedResponseError, SourceUnavailableError
from src.core.models import RawScene, SceneQuery, SourceProfile, SourceResult
from src.sources.base import SceneSource
from src.utils.decorators import source_guard

logger = logging.getLogger("SceneEngine")


def http_get(session: Optional[requests.Session], url: str, **kwargs) -> requests.Response:
    """
    GET through the injected session, or through a Session opened for this call only.
    Searches run on worker threads, so without an injected session none is shared.
    """
    if session is not None:
        return session.get(url, **kwargs)
    with requests.Session() as own_session:
        return own_session.get(url, **kwargs)


class UnsplashSceneSource(SceneSource):
    """
    Live scene search through the Unsplash photo search API.
    """
    profile = SourceProfile(name="unsplash", max_results=30, is_live=True)

    def __init__(self, access_key: str, session: Optional[requests.Session] = None,
                 api_url: str = "https://api.unsplash.com", timeout: float = 20.0):
        if not access_key:
            raise ValueError("Missing Unsplash access key")
        self.access_key = access_key
        self.session = session
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @source_guard
    def search(self, query: SceneQuery, limit: int) -> SourceResult:
        search_text = query.search_text()
        logger.info(f"🔍 Unsplash search: '{search_text}' (limit {limit})")

        try:
            resp = http_get(
                self.session,
                f"{self.api_url}/search/photos",
                params={
                    "query": search_text,
                    "per_page": self.capped(limit),
                    "orientation": "landscape",
                },
                headers={"Authorization": f"Client-ID {self.access_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SourceUnavailableError(f"Unsplash request failed: {e}", source=self.profile.name)

        if not 200 <= resp.status_code < 300:
            raise SourceUnavailableError(
                f"Unsplash API Error {resp.status_code}: {resp.text[:200]}",
                source=self.profile.name,
                http_status=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Unsplash returned invalid JSON: {e}", source=self.profile.name)

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise MalformedResponseError("Unsplash response has no 'results' list", source=self.profile.name)

        scenes = [self._to_scene(photo, i, query) for i, photo in enumerate(results[: self.capped(limit)])
                  if isinstance(photo, dict)]
        logger.info(f"✅ Unsplash returned {len(scenes)} scenes.")
        return SourceResult.success(self.profile.name, scenes)

    def _to_scene(self, photo: dict, index: int, query: SceneQuery) -> RawScene:
        urls = photo.get("urls") or {}
        links = photo.get("links") or {}
        user = photo.get("user") or {}
        photo_id = photo.get("id") or str(index)

        return RawScene(
            id=f"unsplash_{photo_id}",
            title=photo.get("alt_description") or photo.get("description")
                  or f"{query.product_type} CGI Scene {index + 1}",
            description=photo.get("description")
                        or f"Professional CGI rendering and visualization for {query.product_type}",
            image_url=urls.get("regular") or urls.get("full") or urls.get("small") or "",
            source_url=links.get("html") or f"https://unsplash.com/photos/{photo_id}",
            author=user.get("name") or user.get("username"),
        )


class PinterestSceneSource(SceneSource):
    """
    Scrapes the public Pinterest search page for pin images.
    Pinterest renders most of the grid client-side, so this only sees the
    pins embedded in the initial HTML.
    """
    profile = SourceProfile(name="pinterest", max_results=50, is_live=True)

    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    _IMAGE_RE = re.compile(r"https://i\.pinimg\.com/[^\"'\s\\]+?\.(?:jpg|jpeg|png|webp)", re.IGNORECASE)
    _PIN_RE = re.compile(r"/pin/(\d+)/")
    _ALT_RE = re.compile(r'<img[^>]+alt="([^"]{3,200})"[^>]+src="(https://i\.pinimg\.com/[^"]+)"', re.IGNORECASE)

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = "https://www.pinterest.com", timeout: float = 20.0):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @source_guard
    def search(self, query: SceneQuery, limit: int) -> SourceResult:
        search_text = query.search_text()
        url = f"{self.base_url}/search/pins/?q={quote(search_text)}"
        logger.info(f"🌐 Pinterest scrape: {url}")

        try:
            resp = http_get(
                self.session,
                url,
                headers={
                    "User-Agent": self.USER_AGENT,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.9",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SourceUnavailableError(f"Pinterest request failed: {e}", source=self.profile.name)

        if not 200 <= resp.status_code < 300:
            raise SourceUnavailableError(
                f"Pinterest returned {resp.status_code}",
                source=self.profile.name,
                http_status=resp.status_code,
            )

        page = resp.text or ""
        if "<html" not in page.lower():
            raise MalformedResponseError("Pinterest did not return an HTML page", source=self.profile.name)

        scenes = self._extract(page, query, self.capped(limit))
        logger.info(f"✅ Pinterest scrape found {len(scenes)} pins.")
        return SourceResult.success(self.profile.name, scenes)

    def _extract(self, page: str, query: SceneQuery, limit: int) -> List[RawScene]:
        titles = {src: html.unescape(alt) for alt, src in self._ALT_RE.findall(page)}
        pin_ids = list(dict.fromkeys(self._PIN_RE.findall(page)))

        seen = set()
        scenes: List[RawScene] = []
        for image_url in self._IMAGE_RE.findall(page):
            # every rendition of a pin shares the path after the size folder
            key = image_url.split("/", 4)[-1]
            if key in seen:
                continue
            seen.add(key)

            index = len(scenes)
            pin_id = pin_ids[index] if index < len(pin_ids) else None
            scenes.append(
                RawScene(
                    id=f"pinterest_{pin_id}" if pin_id else f"pinterest_scraped_{index + 1}",
                    title=titles.get(image_url) or f"Pinterest CGI Scene {index + 1}",
                    description=f"Professional CGI scene for {query.product_type}",
                    image_url=image_url,
                    source_url=f"{self.base_url}/pin/{pin_id}/" if pin_id else self.base_url,
                )
            )
            if len(scenes) >= limit:
                break
        return scenes
