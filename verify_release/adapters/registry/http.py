"""
Registry HTTP probes — read-only existence checks against package feeds.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request

from verify_release import __version__

logger = logging.getLogger(__name__)

_USER_AGENT = f"verify-release/{__version__}"


def head_status(url: str, timeout: float = 10.0) -> int | None:
    """Send a HEAD request and return the HTTP status code.

    HTTP error responses (404, 503, ...) return their status code.
    Network-level failures (DNS, refused, timeout) return ``None``;
    callers treat both as "not available yet".
    """
    req = urllib.request.Request(
        url,
        method="HEAD",
        headers={"User-Agent": _USER_AGENT},
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.getcode()
    except urllib.error.HTTPError as exc:
        return exc.code
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        logger.debug("HEAD %s failed: %s", url, exc)
        return None


def nuget_normalized_version(version: str) -> str:
    """Version as the flat container stores it: no build metadata, lower-cased.

    >>> nuget_normalized_version("4.17.0-Alpha.1+abc")
    '4.17.0-alpha.1'
    """
    return version.split("+", 1)[0].lower()


def nuget_package_url(feed_url: str, package_id: str, version: str) -> str:
    """Flat-container URL of a ``.nupkg`` for the normalized id and version."""
    pkg = package_id.lower()
    ver = nuget_normalized_version(version)
    return f"{feed_url.rstrip('/')}/{pkg}/{ver}/{pkg}.{ver}.nupkg"
