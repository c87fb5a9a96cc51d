import logging
from functools import wraps

import requests

from src.core.exceptions import MalformedResponseError, SourceUnavailableError
from src.core.models import SourceErrorKind, SourceResult

logger = logging.getLogger("SceneEngine")

# Failures a source is expected to hit; anything else is logged with a traceback
EXPECTED_FAILURES = (
    SourceUnavailableError,
    MalformedResponseError,
    requests.RequestException,
    ValueError,
    KeyError,
    TypeError,
)


def _to_failure(source_name: str, exc: Exception) -> SourceResult:
    if isinstance(exc, MalformedResponseError):
        kind = SourceErrorKind.MALFORMED_RESPONSE
    else:
        kind = SourceErrorKind.UNAVAILABLE
    logger.warning(f"⚠️ Source '{source_name}' failed ({kind.value}): {exc}")
    return SourceResult.failure(source_name, kind, str(exc))


def source_guard(func):
    """
    Turns a source's search method into one that always returns a SourceResult.
    The wrapped method's instance must expose `profile.name`.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except EXPECTED_FAILURES as e:
            return _to_failure(self.profile.name, e)
        except Exception as e:
            logger.error(f"❌ Unexpected error in source '{self.profile.name}': {e}", exc_info=True)
            return _to_failure(self.profile.name, e)

    return wrapper
