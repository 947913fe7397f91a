from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .assets import default_base_url, resolve_asset_url
from .content import Portfolio, load_portfolio, portfolio_to_dict
from .page import render_page
from .schedule_grid import find_grid_conflicts
from .widgets import ActivityCardStates

log = logging.getLogger(__name__)

INDEX_PAGE = "index.html"
CONTENT_DUMP = "content.json"


@dataclass
class SiteBuildResult:
    portfolio: Portfolio
    pages: dict[str, str]
    warnings: list[str]
    output_paths: dict[str, Path]


def _slugify(value: str) -> str:
    s = value.strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


def semester_page_names(portfolio: Portfolio) -> dict[str, str]:
    names: dict[str, str] = {}
    taken: set[str] = set()
    for key in portfolio.semesters:
        slug = _slugify(key) or "semester"
        name = f"semester-{slug}.html"
        suffix = 1
        while name in taken:
            suffix += 1
            name = f"semester-{slug}-{suffix}.html"
        taken.add(name)
        names[key] = name
    return names


def collect_content_warnings(portfolio: Portfolio) -> list[str]:
    warnings: list[str] = []
    for key, semester in portfolio.semesters.items():
        for message in find_grid_conflicts(semester.schedule):
            warnings.append(f"Semester {key}: {message}")
        plan_ids = [plan.id for plan in semester.lesson_plans]
        duplicates = sorted({plan_id for plan_id in plan_ids if plan_ids.count(plan_id) > 1})
        for plan_id in duplicates:
            warnings.append(f"Semester {key}: lesson plan id '{plan_id}' is used more than once.")
    return warnings


def render_site(
    portfolio: Portfolio,
    *,
    base_url: str | None = None,
    year: int | None = None,
) -> dict[str, str]:
    base = base_url if base_url is not None else default_base_url()
    page_names = semester_page_names(portfolio)
    links = {key: resolve_asset_url(name, base) for key, name in page_names.items()}

    pages: dict[str, str] = {}
    for key, name in page_names.items():
        pages[name] = render_page(
            portfolio,
            key,
            base_url=base,
            card_states=ActivityCardStates(),
            semester_links=links,
            year=year,
        )
    pages[INDEX_PAGE] = pages[page_names[portfolio.default_semester]]
    return pages


def build_site(
    *,
    content_path: str | Path,
    output_dir: str | Path,
    base_url: str | None = None,
    strict: bool = True,
) -> SiteBuildResult:
    portfolio = load_portfolio(content_path, strict=strict)
    warnings = collect_content_warnings(portfolio)
    for warning in warnings:
        log.warning(warning)

    base = base_url if base_url is not None else default_base_url()
    pages = render_site(portfolio, base_url=base)

    output_root = Path(output_dir)
    output_root.mkdir(parents=True, exist_ok=True)
    output_paths: dict[str, Path] = {}
    for name, page_html in pages.items():
        path = output_root / name
        path.write_text(page_html, encoding="utf-8")
        output_paths[name] = path

    dump: dict[str, Any] = {"base_url": base, **portfolio_to_dict(portfolio)}
    dump_path = output_root / CONTENT_DUMP
    dump_path.write_text(
        json.dumps(dump, indent=2, ensure_ascii=False, default=str) + "\n", encoding="utf-8"
    )
    output_paths[CONTENT_DUMP] = dump_path

    log.info(
        "Built %d page(s) for %d semester(s) into %s",
        len(pages),
        len(portfolio.semesters),
        output_root,
    )
    return SiteBuildResult(
        portfolio=portfolio,
        pages=pages,
        warnings=warnings,
        output_paths=output_paths,
    )
