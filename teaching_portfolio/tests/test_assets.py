from __future__ import annotations

import pytest

from teaching_portfolio.assets import BASE_URL_ENV, default_base_url, resolve_asset_url


@pytest.mark.parametrize(
    "url",
    [
        "https://x/y",
        "http://example.com/a.png",
        "HTTPS://EXAMPLE.COM/A.PNG",
        "//cdn.example.com/a.png",
        "data:image/png;base64,AAAA",
        "blob:https://example.com/1234",
    ],
)
def test_resolve_asset_url_passes_absolute_urls_through(url):
    assert resolve_asset_url(url, "/app/") == url


def test_resolve_asset_url_anchors_root_and_relative_paths_to_base():
    assert resolve_asset_url("/img/a.png", "/app/") == "/app/img/a.png"
    assert resolve_asset_url("img/a.png", "/app/") == "/app/img/a.png"


def test_resolve_asset_url_normalizes_base_to_single_trailing_slash():
    assert resolve_asset_url("img/a.png", "/app") == "/app/img/a.png"
    assert resolve_asset_url("img/a.png", "/app//") == "/app/img/a.png"
    assert resolve_asset_url("/img/a.png", "/") == "/img/a.png"


def test_resolve_asset_url_leaves_empty_values_alone():
    assert resolve_asset_url("", "/app/") == ""
    assert resolve_asset_url(None, "/app/") is None


def test_default_base_url_reads_environment(monkeypatch):
    monkeypatch.delenv(BASE_URL_ENV, raising=False)
    assert default_base_url() == "/"
    assert resolve_asset_url("img/a.png") == "/img/a.png"

    monkeypatch.setenv(BASE_URL_ENV, "/portfolio")
    assert default_base_url() == "/portfolio"
    assert resolve_asset_url("/img/a.png") == "/portfolio/img/a.png"
