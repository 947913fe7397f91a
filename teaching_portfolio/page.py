from __future__ import annotations

import html
import json
import logging
from datetime import date
from typing import Any, Iterable, Mapping

from .assets import resolve_asset_url
from .content import Activity, LessonPlan, Portfolio, SiteProfile
from .schedule_grid import render_schedule_html
from .semesters import SemesterSelector
from .widgets import ActivityCardState, ActivityCardStates, Carousel

log = logging.getLogger(__name__)

NO_IMAGES_LABEL = "ไม่มีรูปภาพ"
PREV_LABEL = "ก่อนหน้า"
NEXT_LABEL = "ถัดไป"
EXPAND_LABEL = "ดูเพิ่มเติม"
COLLAPSE_LABEL = "ย่อรายละเอียด"
HIGHLIGHTS_LABEL = "สาระสำคัญ"
IMAGE_COUNT_LABEL = "รูปทั้งหมด"
VIEW_LABEL = "ดู"
DOWNLOAD_LABEL = "ดาวน์โหลด"
TEACHING_PROJECT_LABEL = "โครงการสอน"

ACTIVITIES_TITLE = "กิจกรรม"
ACTIVITIES_SUBTITLE = (
    "แสดงกิจกรรมที่ได้ทำระหว่างฝึกสอน "
    "(รูปอยู่ด้านขวา รายละเอียดอยู่ด้านซ้าย และสลับด้านในกิจกรรมถัดไป)"
)
SEMESTER_TITLE = "เลือกภาคเรียน"
SEMESTER_SUBTITLE = "หลังจากแสดงกิจกรรมทั้งหมดแล้ว เลือกภาคเรียนเพื่อดูตารางเรียนและแผนการสอน"
SEMESTER_SUMMARY_TITLE = "สรุป"
SEMESTER_SUMMARY_TEXT = "ตารางเรียนและแผนการสอนจะเปลี่ยนตามภาคเรียนที่เลือก"
SCHEDULE_TITLE = "ตารางเรียน"
LESSON_PLANS_TITLE = "แผนการสอน"
LESSON_PLANS_SUBTITLE = "แผนการสอนจะระบุว่าเป็นวิชาอะไรตามตาราง และมีลิงก์ดาวน์โหลด"
AUTHOR_CARD_LABEL = "ข้อมูลผู้จัดทำ"
FOOTER_LABEL = "ผลงานนักศึกษาฝึกสอน"

_PAGE_STYLE = """
:root { --brand: #7c3aed; --brand-50: #f5f3ff; --brand-200: #ddd6fe; --text: #0f172a; --muted: #64748b; }
body { margin: 0; font-family: system-ui, sans-serif; color: var(--text); background: #fff; }
.container { max-width: 72rem; margin: 0 auto; padding: 2.5rem 1rem; }
.site-header { background: var(--brand-50); border-bottom: 1px solid var(--brand-200); }
.site-header .container { display: flex; flex-wrap: wrap; gap: 1.5rem; justify-content: space-between; align-items: flex-end; }
.pill { display: inline-block; border: 1px solid var(--brand-200); background: var(--brand-50); border-radius: 999px; padding: 0.25rem 0.75rem; font-size: 0.75rem; }
.card { border: 1px solid var(--brand-200); border-radius: 1.5rem; padding: 1.5rem; margin-bottom: 1.5rem; display: grid; gap: 1.5rem; grid-template-columns: 1fr 1fr; }
.card.reverse .card-body { order: 2; }
.panel { position: relative; margin-top: 0.75rem; padding: 1rem; border-radius: 1rem; background: var(--brand-50); max-height: 180px; overflow: hidden; }
.card.expanded .panel { max-height: 420px; overflow-y: auto; }
.panel .description { white-space: pre-line; font-size: 0.875rem; line-height: 1.6; }
.panel .fade { position: absolute; left: 0; right: 0; bottom: 0; height: 3.5rem; background: linear-gradient(to top, #fff, transparent); pointer-events: none; }
.card.expanded .panel .fade { display: none; }
.carousel { position: relative; aspect-ratio: 16 / 10; border: 1px solid var(--brand-200); border-radius: 1rem; overflow: hidden; background: var(--brand-50); }
.carousel img { width: 100%; height: 100%; object-fit: cover; }
.carousel.placeholder { display: flex; align-items: center; justify-content: center; color: var(--muted); font-size: 0.875rem; }
.carousel button { position: absolute; top: 50%; transform: translateY(-50%); border-radius: 0.75rem; border: 1px solid #fff; background: rgba(255, 255, 255, 0.8); padding: 0.5rem 0.75rem; cursor: pointer; }
.carousel .prev { left: 0.75rem; }
.carousel .next { right: 0.75rem; }
.muted, .image-count, .plan-link { color: var(--muted); font-size: 0.75rem; }
.tabs { display: inline-flex; border: 1px solid var(--brand-200); border-radius: 1rem; padding: 0.25rem; }
.tab { padding: 0.5rem 1rem; border-radius: 0.75rem; text-decoration: none; color: var(--text); }
.tab.active { background: var(--brand); color: #fff; }
.button { display: inline-block; border: 1px solid var(--brand-200); border-radius: 0.75rem; padding: 0.5rem 1rem; font-weight: 600; text-decoration: none; color: var(--brand); background: #fff; }
.button.primary { background: var(--brand); color: #fff; }
.table-scroll { overflow-x: auto; margin-bottom: 1.5rem; border: 1px solid var(--brand-200); border-radius: 1rem; }
table { border-collapse: collapse; width: 100%; font-size: 0.875rem; }
th, td { border: 1px solid var(--brand-200); padding: 0.5rem; }
.schedule-grid { min-width: 1200px; }
.slot-break, .period-break { background: var(--brand-50); }
.slot-class { text-align: center; font-size: 0.75rem; }
.slot-code { font-weight: 600; }
.day-label, .meta-label { font-weight: 600; }
.meta-cell { width: 240px; vertical-align: top; }
.meta-school { font-weight: 600; margin-bottom: 0.75rem; }
.meta-row { display: grid; grid-template-columns: 84px 1fr; gap: 0.5rem; }
.center { text-align: center; }
.plans { display: grid; gap: 1rem; grid-template-columns: 1fr 1fr; }
.plan { border: 1px solid var(--brand-200); border-radius: 1rem; padding: 1.25rem; }
.plan-link { word-break: break-all; margin-top: 0.75rem; }
.site-footer { border-top: 1px solid var(--brand-200); color: var(--muted); font-size: 0.875rem; }
@media (max-width: 768px) { .card, .plans { grid-template-columns: 1fr; } .card.reverse .card-body { order: 0; } }
"""

_PAGE_SCRIPT = """
document.querySelectorAll("[data-carousel]").forEach(function (root) {
  var images = JSON.parse(root.dataset.images || "[]");
  var index = Number(root.dataset.index || 0);
  var img = root.querySelector("img");
  root.querySelectorAll("[data-step]").forEach(function (button) {
    button.addEventListener("click", function () {
      index = (index + Number(button.dataset.step) + images.length) % images.length;
      root.dataset.index = String(index);
      img.src = images[index];
    });
  });
});
document.querySelectorAll("[data-toggle-panel]").forEach(function (button) {
  button.addEventListener("click", function () {
    var card = button.closest(".card");
    var expanded = card.classList.toggle("expanded");
    button.setAttribute("aria-expanded", String(expanded));
    button.querySelector(".toggle-label").textContent =
      expanded ? button.dataset.collapseLabel : button.dataset.expandLabel;
    var highlights = card.querySelector(".highlights");
    if (highlights) { highlights.hidden = !expanded; }
  });
});
"""


def _escape(value: Any) -> str:
    return html.escape(str(value))


def render_pill(text: str) -> str:
    return f'<span class="pill">{_escape(text)}</span>'


def render_section(title: str, body: str, subtitle: str | None = None) -> str:
    subtitle_html = f'<p class="subtitle">{_escape(subtitle)}</p>' if subtitle else ""
    return f"""<section class="container">
  <h2>{_escape(title)}</h2>
  {subtitle_html}
  {body}
</section>"""


def render_carousel(carousel: Carousel, title: str, base_url: str | None = None) -> str:
    if carousel.shows_placeholder:
        return f'<div class="carousel placeholder">{_escape(NO_IMAGES_LABEL)}</div>'

    resolved = [resolve_asset_url(image, base_url) for image in carousel.images]
    current = resolved[carousel.index]
    controls = ""
    if carousel.can_navigate:
        controls = (
            f'<button type="button" class="prev" data-step="-1" aria-label="{_escape(PREV_LABEL)}">&lsaquo;</button>'
            f'<button type="button" class="next" data-step="1" aria-label="{_escape(NEXT_LABEL)}">&rsaquo;</button>'
        )
    images_attr = html.escape(json.dumps(resolved, ensure_ascii=False), quote=True)
    return (
        f'<div class="carousel" data-carousel data-index="{carousel.index}" data-images="{images_attr}">'
        f'<img src="{html.escape(current, quote=True)}" alt="{_escape(title)}" loading="lazy"/>'
        f"{controls}"
        "</div>"
    )


def render_activity_card(
    activity: Activity,
    state: ActivityCardState,
    *,
    reverse: bool = False,
    base_url: str | None = None,
) -> str:
    panel = state.panel
    classes = ["card"]
    if reverse:
        classes.append("reverse")
    if panel.expanded:
        classes.append("expanded")

    highlights_html = ""
    if panel.has_highlights:
        items = "".join(f"<li>{_escape(item)}</li>" for item in panel.highlights)
        hidden = "" if panel.visible_highlights else " hidden"
        highlights_html = (
            f'<div class="highlights"{hidden}>'
            f"<strong>{_escape(HIGHLIGHTS_LABEL)}</strong>"
            f"<ul>{items}</ul>"
            "</div>"
        )

    fade_html = '<div class="fade"></div>' if panel.shows_fade else ""

    toggle_html = ""
    if panel.can_expand:
        label = COLLAPSE_LABEL if panel.expanded else EXPAND_LABEL
        toggle_html = (
            '<button type="button" class="button" data-toggle-panel '
            f'aria-expanded="{str(panel.expanded).lower()}" '
            f'data-expand-label="{_escape(EXPAND_LABEL)}" '
            f'data-collapse-label="{_escape(COLLAPSE_LABEL)}">'
            f'<span class="toggle-label">{_escape(label)}</span> &#9660;'
            "</button>"
        )

    return f"""<article class="{' '.join(classes)}" id="activity-{_escape(activity.id)}">
  <div class="card-body">
    <div>{render_pill(activity.date)} {render_pill(activity.location)}</div>
    <h3>{_escape(activity.title)}</h3>
    <div class="panel">
      <p class="description">{_escape(panel.description)}</p>
      {highlights_html}
      {fade_html}
    </div>
    {toggle_html}
  </div>
  <div class="card-media">
    {render_carousel(state.carousel, activity.title, base_url)}
    <div class="image-count">{_escape(IMAGE_COUNT_LABEL)}: {len(activity.images)}</div>
  </div>
</article>"""


def render_activities(
    activities: Iterable[Activity],
    card_states: ActivityCardStates,
    *,
    base_url: str | None = None,
) -> str:
    return "\n".join(
        render_activity_card(
            activity,
            card_states.state_for(activity),
            reverse=index % 2 == 1,
            base_url=base_url,
        )
        for index, activity in enumerate(activities)
    )


def render_semester_tabs(
    selector: SemesterSelector,
    semester_links: Mapping[str, str] | None = None,
) -> str:
    tabs = []
    for key, label, active in selector.tabs():
        css = "tab active" if active else "tab"
        current = ' aria-current="page"' if active else ""
        href = (semester_links or {}).get(key)
        if href:
            tabs.append(
                f'<a class="{css}" href="{html.escape(href, quote=True)}"{current}>{_escape(label)}</a>'
            )
        else:
            tabs.append(f'<span class="{css}"{current}>{_escape(label)}</span>')
    return f"""<div class="semester-tabs">
  <div class="muted">{_escape(SEMESTER_TITLE)}</div>
  <div class="tabs">{''.join(tabs)}</div>
  <div class="summary"><strong>{_escape(SEMESTER_SUMMARY_TITLE)}</strong>
    <div class="muted">{_escape(SEMESTER_SUMMARY_TEXT)}</div>
  </div>
</div>"""


def render_document_links(url: str | None, base_url: str | None = None) -> str:
    if not url:
        return ""
    href = html.escape(resolve_asset_url(url, base_url) or "", quote=True)
    return (
        f'<a class="button" href="{href}" target="_blank" rel="noreferrer">{_escape(VIEW_LABEL)}</a> '
        f'<a class="button primary" href="{href}" download>{_escape(DOWNLOAD_LABEL)}</a>'
    )


def render_lesson_plan(plan: LessonPlan, base_url: str | None = None) -> str:
    return f"""<div class="plan" id="plan-{_escape(plan.id)}">
  <div class="muted">วิชา</div>
  <div class="plan-subject"><strong>{_escape(plan.subject)}</strong></div>
  <div>หัวข้อ: {_escape(plan.topic)}</div>
  <div class="plan-actions">{render_document_links(plan.download_url, base_url)}</div>
  <div class="plan-link">ลิงก์: {_escape(plan.download_url or '-')}</div>
</div>"""


def render_lesson_plans(plans: Iterable[LessonPlan], base_url: str | None = None) -> str:
    items = "\n".join(render_lesson_plan(plan, base_url) for plan in plans)
    return f'<div class="plans">{items}</div>'


def _render_header(profile: SiteProfile) -> str:
    badges = " ".join(render_pill(badge) for badge in profile.badges)
    tagline = f"<p>{_escape(profile.tagline)}</p>" if profile.tagline else ""
    author_lines = "".join(
        f"<div>{_escape(value)}</div>"
        for value in (profile.author_name, profile.affiliation)
        if value
    )
    author_card = (
        f'<div class="author-card"><div class="muted">{_escape(AUTHOR_CARD_LABEL)}</div>{author_lines}</div>'
        if author_lines
        else ""
    )
    return f"""<header class="site-header">
  <div class="container">
    <div>
      <div>{badges}</div>
      <h1>{_escape(profile.title)}</h1>
      {tagline}
    </div>
    {author_card}
  </div>
</header>"""


def _render_footer(profile: SiteProfile, year: int) -> str:
    contact = [profile.author_name, profile.institution]
    if profile.phone:
        contact.append(f"เบอร์ : {profile.phone}")
    if profile.email:
        contact.append(f"Email : {profile.email}")
    contact_html = "<br/>".join(_escape(line) for line in contact if line)
    return f"""<footer class="site-footer">
  <div class="container">
    <div>&copy; {year} {_escape(FOOTER_LABEL)}</div>
    <div>{contact_html}</div>
  </div>
</footer>"""


def render_page(
    portfolio: Portfolio,
    semester_key: str | None = None,
    *,
    base_url: str | None = None,
    card_states: ActivityCardStates | None = None,
    semester_links: Mapping[str, str] | None = None,
    year: int | None = None,
) -> str:
    selector = SemesterSelector(
        portfolio.semesters,
        semester_key if semester_key is not None else portfolio.default_semester,
    )
    semester = selector.current
    card_states = card_states if card_states is not None else ActivityCardStates()
    log.debug("Rendering page for semester %s", semester.key)

    teaching_project_html = ""
    if selector.teaching_project_url:
        teaching_project_html = (
            '<div class="teaching-project">'
            f"<strong>{_escape(TEACHING_PROJECT_LABEL)}</strong> "
            f"{render_document_links(selector.teaching_project_url, base_url)}"
            "</div>"
        )

    sections = [
        render_section(
            ACTIVITIES_TITLE,
            render_activities(portfolio.activities, card_states, base_url=base_url),
            ACTIVITIES_SUBTITLE,
        ),
        render_section(
            SEMESTER_TITLE,
            render_semester_tabs(selector, semester_links),
            SEMESTER_SUBTITLE,
        ),
        render_section(
            SCHEDULE_TITLE,
            teaching_project_html + render_schedule_html(selector.schedule),
            semester.label,
        ),
        render_section(
            LESSON_PLANS_TITLE,
            render_lesson_plans(selector.lesson_plans, base_url),
            LESSON_PLANS_SUBTITLE,
        ),
    ]

    profile = portfolio.profile
    return f"""<!DOCTYPE html>
<html lang="th">
<head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width, initial-scale=1"/>
<title>{_escape(profile.title)} - {_escape(semester.label)}</title>
<style>{_PAGE_STYLE}</style>
</head>
<body>
{_render_header(profile)}
<main>
{''.join(sections)}
</main>
{_render_footer(profile, year if year is not None else date.today().year)}
<script>{_PAGE_SCRIPT}</script>
</body>
</html>
"""
