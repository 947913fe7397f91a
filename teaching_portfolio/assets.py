from __future__ import annotations

import os
import re

BASE_URL_ENV = "PORTFOLIO_BASE_URL"
DEFAULT_BASE_URL = "/"

_ABSOLUTE_URL_RE = re.compile(r"^(https?:)?//", re.IGNORECASE)
_PASSTHROUGH_SCHEMES = ("data:", "blob:")


def default_base_url() -> str:
    value = str(os.environ.get(BASE_URL_ENV, "")).strip()
    return value or DEFAULT_BASE_URL


def _normalize_base(base_url: str | None) -> str:
    base = base_url if base_url is not None else default_base_url()
    return base.rstrip("/") + "/"


def is_passthrough_url(url: str) -> bool:
    if _ABSOLUTE_URL_RE.match(url):
        return True
    return url.startswith(_PASSTHROUGH_SCHEMES)


def resolve_asset_url(url: str | None, base_url: str | None = None) -> str | None:
    """Anchor a content path to the site base.

    Absolute http(s), protocol-relative, data: and blob: URLs are returned
    as-is, as are empty values. Everything else is treated as relative to
    ``base_url`` (or ``$PORTFOLIO_BASE_URL``), whether or not it starts with
    a slash.
    """
    if not url:
        return url
    if is_passthrough_url(url):
        return url
    return _normalize_base(base_url) + url.lstrip("/")
