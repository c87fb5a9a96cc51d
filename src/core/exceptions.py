"""
Domain exceptions.

Source errors never reach API callers: strategies raise them and the
acquisition chain turns them into failed SourceResults.
"""

from typing import Any, Dict, Optional


class SceneEngineError(Exception):
    """Base exception for the scene engine."""

    def __init__(self, message: str, code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class SourceUnavailableError(SceneEngineError):
    """Network failure, timeout or non-2xx status from a scene source."""

    def __init__(self, message: str, source: str, http_status: Optional[int] = None):
        super().__init__(message, code=502)
        self.details["source"] = source
        self.details["http_status"] = http_status


class MalformedResponseError(SceneEngineError):
    """A scene source answered with a body we could not parse."""

    def __init__(self, message: str, source: str):
        super().__init__(message, code=502)
        self.details["source"] = source


class CandidateProcessingError(SceneEngineError):
    """A single candidate could not be normalised and is dropped."""

    def __init__(self, message: str, scene_id: Optional[str] = None):
        super().__init__(message, code=422)
        self.details["scene_id"] = scene_id


class CatalogError(SceneEngineError):
    """The default scenes catalog is missing, malformed, or lacks a category."""

    def __init__(self, message: str, code: int = 500):
        super().__init__(message, code=code)


class InvalidPackageError(SceneEngineError):
    def __init__(self, message: str, package_id: str):
        super().__init__(message, code=400)
        self.details["package_id"] = package_id
