from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schemas") / "portfolio.schema.yaml"

DEFAULT_SITE_TITLE = "เว็บไซต์แสดงผลงานนักศึกษาฝึกสอน"
DEFAULT_BADGES = ("Portfolio", "นักศึกษาฝึกสอน")


class ContentError(ValueError):
    """Portfolio content that cannot be turned into a site."""


class ContentLoadError(ContentError):
    """A content file that could not be read or parsed at all."""


@dataclass(frozen=True)
class Activity:
    id: str
    title: str
    date: str
    location: str
    description: str
    images: tuple[str, ...] = ()
    highlights: tuple[str, ...] = ()


@dataclass(frozen=True)
class Period:
    key: str
    label: str
    time: str
    is_break: bool = False


@dataclass(frozen=True)
class Day:
    key: str
    label: str


@dataclass(frozen=True)
class Cell:
    code: str
    room: str
    # Kept as supplied; see schedule_grid.effective_span.
    span: Any = 1


@dataclass(frozen=True)
class Subject:
    code: str
    name: str
    tpn: str


@dataclass(frozen=True)
class ScheduleMeta:
    school: str | None = None
    term: str | None = None
    teacher: str | None = None
    group_code: str | None = None
    group_name: str | None = None


@dataclass(frozen=True)
class Schedule:
    meta: ScheduleMeta = field(default_factory=ScheduleMeta)
    subjects: tuple[Subject, ...] = ()
    periods: tuple[Period, ...] = ()
    days: tuple[Day, ...] = ()
    grid: dict[str, dict[str, Cell]] = field(default_factory=dict)

    def cell_at(self, day_key: str, period_key: str) -> Cell | None:
        return self.grid.get(day_key, {}).get(period_key)


@dataclass(frozen=True)
class LessonPlan:
    id: str
    subject: str
    topic: str
    download_url: str | None = None


@dataclass(frozen=True)
class Semester:
    key: str
    label: str
    schedule: Schedule = field(default_factory=Schedule)
    lesson_plans: tuple[LessonPlan, ...] = ()
    teaching_project_url: str | None = None


@dataclass(frozen=True)
class SiteProfile:
    title: str = DEFAULT_SITE_TITLE
    tagline: str | None = None
    badges: tuple[str, ...] = DEFAULT_BADGES
    author_name: str | None = None
    affiliation: str | None = None
    institution: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Portfolio:
    profile: SiteProfile
    activities: tuple[Activity, ...]
    semesters: dict[str, Semester]
    default_semester: str


def _load_yaml_module():
    try:
        import yaml
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "PyYAML is required to read portfolio content. "
            "Install dependencies (e.g., `pip install -e .`)."
        ) from exc
    return yaml


def _pick(raw: dict[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in raw and raw[name] is not None:
            return raw[name]
    return default


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text(value: Any) -> str:
    return _optional_text(value) or ""


def _as_list(value: Any, where: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    log.warning("%s is not a list (%s); treating it as empty.", where, type(value).__name__)
    return []


def _as_mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    log.warning("%s is not a mapping (%s); treating it as empty.", where, type(value).__name__)
    return {}


def _records(value: Any, where: str) -> list[tuple[int, dict[str, Any]]]:
    records = []
    for index, item in enumerate(_as_list(value, where)):
        if not isinstance(item, dict):
            log.warning("Skipping %s[%d]: expected a mapping, got %r.", where, index, item)
            continue
        records.append((index, item))
    return records


def format_error_path(error_path) -> str:
    parts = []
    for part in error_path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}")
    if not parts:
        return "$"
    return "$" + "".join(parts)


def load_content_file(content_path: str | Path) -> dict[str, Any]:
    path = Path(content_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ContentLoadError(f"JSON parse error in {path}: {exc}") from exc
    else:
        yaml = _load_yaml_module()
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ContentLoadError(f"YAML parse error in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ContentLoadError("Portfolio content must be a mapping/object at the top level.")
    return raw


def load_schema(schema_path: str | Path | None = None) -> dict[str, Any]:
    path = Path(schema_path) if schema_path is not None else SCHEMA_PATH
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return _load_yaml_module().safe_load(text)


def validate_content(
    raw_content: dict[str, Any],
    *,
    schema: dict[str, Any] | None = None,
) -> list[str]:
    """Check raw content against the portfolio JSON Schema.

    Returns one readable message per violation, ordered by location; an
    empty list means the content is valid.
    """
    validator = Draft202012Validator(schema if schema is not None else load_schema())
    errors = sorted(
        validator.iter_errors(raw_content),
        key=lambda err: [str(part) for part in err.path],
    )
    messages: list[str] = []
    for err in errors:
        message = f"{format_error_path(err.path)}: {err.message}"
        context = best_match(err.context) if err.context else None
        if context is not None:
            message += f" ({context.message})"
        messages.append(message)
    return messages


def _normalize_activity(index: int, raw: dict[str, Any]) -> Activity:
    where = f"activities[{index}]"
    description = raw.get("description")
    if description is None:
        description = ""
    elif not isinstance(description, str):
        description = str(description)
    return Activity(
        id=_optional_text(raw.get("id")) or f"activity-{index + 1}",
        title=_text(raw.get("title")),
        date=_text(raw.get("date")),
        location=_text(raw.get("location")),
        description=description,
        images=tuple(
            item for item in _as_list(raw.get("images"), f"{where}.images")
            if isinstance(item, str)
        ),
        highlights=tuple(
            str(item).strip()
            for item in _as_list(raw.get("highlights"), f"{where}.highlights")
            if item is not None and str(item).strip()
        ),
    )


def _normalize_cell(raw: Any, where: str) -> Cell | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        log.warning("Skipping %s: expected a mapping, got %r.", where, raw)
        return None
    return Cell(
        code=_text(raw.get("code")),
        room=_text(raw.get("room")),
        span=raw.get("span", 1),
    )


def _normalize_schedule(raw: dict[str, Any], where: str) -> Schedule:
    meta_raw = _as_mapping(raw.get("meta"), f"{where}.meta")
    meta = ScheduleMeta(
        school=_optional_text(meta_raw.get("school")),
        term=_optional_text(meta_raw.get("term")),
        teacher=_optional_text(meta_raw.get("teacher")),
        group_code=_optional_text(_pick(meta_raw, "group_code", "groupCode")),
        group_name=_optional_text(_pick(meta_raw, "group_name", "groupName")),
    )

    subjects = tuple(
        Subject(
            code=_text(item.get("code")),
            name=_text(item.get("name")),
            tpn=_text(item.get("tpn")),
        )
        for _, item in _records(raw.get("subjects"), f"{where}.subjects")
    )

    periods = tuple(
        Period(
            key=_optional_text(item.get("key")) or f"period-{index + 1}",
            label=_text(item.get("label")),
            time=_text(item.get("time")),
            is_break=bool(_pick(item, "is_break", "isBreak", default=False)),
        )
        for index, item in _records(raw.get("periods"), f"{where}.periods")
    )

    days = tuple(
        Day(
            key=_optional_text(item.get("key")) or f"day-{index + 1}",
            label=_text(item.get("label")),
        )
        for index, item in _records(raw.get("days"), f"{where}.days")
    )

    grid: dict[str, dict[str, Cell]] = {}
    for day_key, row_raw in _as_mapping(raw.get("grid"), f"{where}.grid").items():
        row: dict[str, Cell] = {}
        row_where = f"{where}.grid.{day_key}"
        for period_key, cell_raw in _as_mapping(row_raw, row_where).items():
            cell = _normalize_cell(cell_raw, f"{row_where}.{period_key}")
            if cell is not None:
                row[str(period_key)] = cell
        grid[str(day_key)] = row

    return Schedule(meta=meta, subjects=subjects, periods=periods, days=days, grid=grid)


def _normalize_semester(key: str, raw: dict[str, Any]) -> Semester:
    where = f"semesters.{key}"
    lesson_plans = tuple(
        LessonPlan(
            id=_optional_text(item.get("id")) or f"plan-{index + 1}",
            subject=_text(item.get("subject")),
            topic=_text(item.get("topic")),
            download_url=_optional_text(_pick(item, "download_url", "downloadUrl")),
        )
        for index, item in _records(
            _pick(raw, "lesson_plans", "lessonPlans"), f"{where}.lesson_plans"
        )
    )
    return Semester(
        key=key,
        label=_optional_text(raw.get("label")) or key,
        schedule=_normalize_schedule(
            _as_mapping(raw.get("schedule"), f"{where}.schedule"), f"{where}.schedule"
        ),
        lesson_plans=lesson_plans,
        teaching_project_url=_optional_text(
            _pick(raw, "teaching_project_url", "teachingProjectUrl")
        ),
    )


def _normalize_profile(raw: dict[str, Any]) -> SiteProfile:
    author = _as_mapping(raw.get("author"), "site.author")
    badges_raw = raw.get("badges")
    badges = (
        tuple(_text(item) for item in _as_list(badges_raw, "site.badges") if _text(item))
        if badges_raw is not None
        else DEFAULT_BADGES
    )
    return SiteProfile(
        title=_optional_text(raw.get("title")) or DEFAULT_SITE_TITLE,
        tagline=_optional_text(raw.get("tagline")),
        badges=badges,
        author_name=_optional_text(author.get("name")),
        affiliation=_optional_text(author.get("affiliation")),
        institution=_optional_text(author.get("institution")),
        phone=_optional_text(author.get("phone")),
        email=_optional_text(author.get("email")),
    )


def normalize_portfolio(raw_content: dict[str, Any]) -> Portfolio:
    activities = tuple(
        _normalize_activity(index, item)
        for index, item in _records(raw_content.get("activities"), "activities")
    )
    seen_ids: set[str] = set()
    for activity in activities:
        if activity.id in seen_ids:
            raise ContentError(f"Duplicate activity id '{activity.id}'.")
        seen_ids.add(activity.id)

    semesters: dict[str, Semester] = {}
    for mapping_key, semester_raw in _as_mapping(
        raw_content.get("semesters"), "semesters"
    ).items():
        if not isinstance(semester_raw, dict):
            log.warning("Skipping semester %r: expected a mapping.", mapping_key)
            continue
        key = _optional_text(semester_raw.get("key")) or str(mapping_key)
        if key in semesters:
            raise ContentError(f"Duplicate semester key '{key}'.")
        semesters[key] = _normalize_semester(key, semester_raw)

    if not semesters:
        raise ContentError("At least one semester is required.")

    default_key = _optional_text(
        _pick(raw_content, "default_semester", "defaultSemester")
    )
    if default_key is None:
        default_key = next(iter(semesters))
    elif default_key not in semesters:
        raise ContentError(
            f"default_semester '{default_key}' is not one of: {', '.join(semesters)}"
        )

    return Portfolio(
        profile=_normalize_profile(_as_mapping(raw_content.get("site"), "site")),
        activities=activities,
        semesters=semesters,
        default_semester=default_key,
    )


def load_portfolio(content_path: str | Path, *, strict: bool = True) -> Portfolio:
    raw = load_content_file(content_path)
    if strict:
        errors = validate_content(raw)
        if errors:
            details = "\n".join(f"- {message}" for message in errors)
            raise ContentError(
                f"{content_path} does not match the portfolio schema "
                f"({len(errors)} error(s)):\n{details}"
            )
    return normalize_portfolio(raw)


def portfolio_to_dict(portfolio: Portfolio) -> dict[str, Any]:
    return dataclasses.asdict(portfolio)
