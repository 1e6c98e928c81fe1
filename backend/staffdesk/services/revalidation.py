"""
Cache invalidation signal.

After a successful mutation an action names the UI view paths that now show
stale data. Each path gets a monotonically increasing version number that the
UI can poll, and when REVALIDATE_URL is configured the path is also pushed to
the UI server. Signalling is fire-and-forget: a failure here never fails the
action that triggered it.
"""

import logging
import threading
from datetime import datetime, timezone

import httpx

from staffdesk import config

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_versions: dict[str, int] = {}
_stamps: dict[str, datetime] = {}


def revalidate_path(path: str) -> None:
    with _lock:
        _versions[path] = _versions.get(path, 0) + 1
        _stamps[path] = datetime.now(timezone.utc)
        version = _versions[path]
    logger.debug("revalidate %s (v%s)", path, version)

    if config.REVALIDATE_URL:
        _notify(path)


def _notify(path: str) -> None:
    try:
        r = httpx.post(
            config.REVALIDATE_URL,
            json={"path": path},
            timeout=config.REVALIDATE_TIMEOUT,
        )
        r.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Revalidation push for %s failed: %s", path, e)


def stale_paths(since: datetime | None = None) -> list[dict]:
    """Known paths with their current version, optionally only those touched after `since`."""
    with _lock:
        items = [
            {"path": p, "version": v, "updatedAt": _stamps[p].isoformat()}
            for p, v in _versions.items()
            if since is None or _stamps[p] > since
        ]
    return sorted(items, key=lambda x: x["path"])


def path_version(path: str) -> int:
    with _lock:
        return _versions.get(path, 0)


def reset() -> None:
    with _lock:
        _versions.clear()
        _stamps.clear()
