"""Conversion between version strings and URL fragments."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_SERVICE = "pollbot"
DEFAULT_PRODUCT = "firefox"

# Eg: "#pollbot/firefox/50.0"
_FRAGMENT_RE = re.compile(r"#(\w+)/(\w+)/([^/]+)/?", re.ASCII)


@dataclass(frozen=True)
class VersionLocator:
    """Service, product and version encoded in a URL fragment."""

    service: str
    product: str
    version: str


def parse_url(fragment: str) -> VersionLocator | None:
    """Parse a fragment like ``"#pollbot/firefox/50.0"`` into a locator.

    Returns None when the fragment does not encode a version. Segments after
    the version are ignored.
    """
    if not fragment:
        return None
    m = _FRAGMENT_RE.match(fragment)
    if not m:
        return None
    service, product, version = m.groups()
    return VersionLocator(service=service, product=product, version=version)


def local_url_from_version(
    version: str,
    service: str = DEFAULT_SERVICE,
    product: str = DEFAULT_PRODUCT,
) -> str:
    """Return the relative, fragment-only link for *version*."""
    return f"#{service}/{product}/{version}"
