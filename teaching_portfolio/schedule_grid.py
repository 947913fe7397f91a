from __future__ import annotations

import html
import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .content import Cell, Day, Period, Schedule


SLOT_BREAK = "break"
SLOT_EMPTY = "empty"
SLOT_CLASS = "class"

MISSING_VALUE = "-"
BREAK_LABEL = "พัก"
CORNER_LABEL = "เวลา / วัน"
DEFAULT_SCHOOL_LABEL = "สถานศึกษา"
NO_SUBJECTS_LABEL = "ยังไม่มีรายการรายวิชา"
META_LABELS = (
    ("term", "ภาคเรียน"),
    ("teacher", "ครูผู้สอน"),
    ("group_code", "รหัสกลุ่ม"),
    ("group_name", "ชื่อกลุ่ม"),
)
SUBJECT_HEADERS = ("รหัสวิชา", "ชื่อรายวิชา", "ท/ป/น")


@dataclass(frozen=True)
class GridSlot:
    period_key: str
    kind: str
    colspan: int = 1
    cell: Cell | None = None


def effective_span(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    if not math.isfinite(value) or value <= 1:
        return 1
    return math.floor(value)


def layout_day_row(
    periods: Sequence[Period],
    row: Mapping[str, Cell] | None,
) -> list[GridSlot]:
    """Lay out one day as table cells under the shared period header.

    A merged cell consumes the columns it covers by moving the cursor past
    them, so every row lines up with the header without a second pass.
    """
    row = row or {}
    slots: list[GridSlot] = []
    i = 0
    while i < len(periods):
        period = periods[i]
        if period.is_break:
            slots.append(GridSlot(period.key, SLOT_BREAK))
            i += 1
            continue

        cell = row.get(period.key)
        if cell is None:
            slots.append(GridSlot(period.key, SLOT_EMPTY))
            i += 1
            continue

        span = effective_span(cell.span)
        slots.append(GridSlot(period.key, SLOT_CLASS, colspan=span, cell=cell))
        i += span
    return slots


def layout_grid(schedule: Schedule) -> dict[str, list[GridSlot]]:
    return {
        day.key: layout_day_row(schedule.periods, schedule.grid.get(day.key))
        for day in schedule.days
    }


def find_grid_conflicts(schedule: Schedule) -> list[str]:
    """Report merged cells that overrun the day or hide other cells.

    Rendering is unaffected; these are problems in the content itself.
    """
    warnings: list[str] = []
    period_keys = [period.key for period in schedule.periods]
    positions = {key: index for index, key in enumerate(period_keys)}
    day_labels = {day.key: day.label or day.key for day in schedule.days}

    for day_key, row in schedule.grid.items():
        day_label = day_labels.get(day_key, day_key)
        if day_key not in day_labels:
            warnings.append(f"Grid row '{day_key}' does not match any day.")
        for period_key, cell in row.items():
            if period_key not in positions:
                warnings.append(
                    f"{day_label}: cell {cell.code!r} is placed in unknown period '{period_key}'."
                )

        for slot in layout_day_row(schedule.periods, row):
            if slot.colspan <= 1 or slot.cell is None:
                continue
            start = positions[slot.period_key]
            end = start + slot.colspan
            if end > len(period_keys):
                warnings.append(
                    f"{day_label}: {slot.cell.code!r} at '{slot.period_key}' spans "
                    f"{slot.colspan} periods but only {len(period_keys) - start} remain."
                )
            for covered_key in period_keys[start + 1:end]:
                hidden = schedule.cell_at(day_key, covered_key)
                if hidden is not None:
                    warnings.append(
                        f"{day_label}: {hidden.code!r} at '{covered_key}' is hidden under "
                        f"{slot.cell.code!r} spanning from '{slot.period_key}'."
                    )
    return warnings


def _escape(value: Any) -> str:
    return html.escape(str(value))


def _render_meta_table(schedule: Schedule) -> str:
    meta = schedule.meta
    school = meta.school or DEFAULT_SCHOOL_LABEL
    meta_rows = "".join(
        '<div class="meta-row">'
        f'<div class="meta-label">{_escape(label)}</div>'
        f"<div>{_escape(getattr(meta, attr) or MISSING_VALUE)}</div>"
        "</div>"
        for attr, label in META_LABELS
    )

    header_cells = "".join(f"<th>{_escape(title)}</th>" for title in SUBJECT_HEADERS)
    if schedule.subjects:
        subject_rows = "".join(
            "<tr>"
            f"<td>{_escape(subject.code)}</td>"
            f"<td>{_escape(subject.name)}</td>"
            f'<td class="center">{_escape(subject.tpn)}</td>'
            "</tr>"
            for subject in schedule.subjects
        )
    else:
        subject_rows = (
            f'<tr><td class="center muted" colspan="{len(SUBJECT_HEADERS)}">'
            f"{_escape(NO_SUBJECTS_LABEL)}</td></tr>"
        )

    return f"""<table class="schedule-meta">
  <tbody>
    <tr>
      <td class="meta-cell">
        <div class="meta-school">{_escape(school)}</div>
        {meta_rows}
      </td>
      <td class="subjects-cell">
        <table class="subjects">
          <thead><tr>{header_cells}</tr></thead>
          <tbody>{subject_rows}</tbody>
        </table>
      </td>
    </tr>
  </tbody>
</table>"""


def _render_slot(slot: GridSlot) -> str:
    if slot.kind == SLOT_BREAK:
        return '<td class="slot-break"></td>'
    if slot.kind == SLOT_EMPTY or slot.cell is None:
        return '<td class="slot-empty"></td>'
    colspan = f' colspan="{slot.colspan}"' if slot.colspan > 1 else ""
    return (
        f'<td class="slot-class"{colspan}>'
        f'<div class="slot-code">{_escape(slot.cell.code)}</div>'
        f'<div class="slot-room">{_escape(slot.cell.room)}</div>'
        "</td>"
    )


def _render_period_header(period: Period) -> str:
    label = BREAK_LABEL if period.is_break else period.label
    css = ' class="period-break"' if period.is_break else ""
    return (
        f"<th{css}>"
        f'<div class="period-time">{_escape(period.time)}</div>'
        f'<div class="period-label">{_escape(label)}</div>'
        "</th>"
    )


def _render_day_row(day: Day, slots: Sequence[GridSlot]) -> str:
    return (
        "<tr>"
        f'<td class="day-label">{_escape(day.label)}</td>'
        + "".join(_render_slot(slot) for slot in slots)
        + "</tr>"
    )


def render_grid_table(schedule: Schedule) -> str:
    header = "".join(_render_period_header(period) for period in schedule.periods)
    layout = layout_grid(schedule)
    rows = "".join(_render_day_row(day, layout[day.key]) for day in schedule.days)
    return f"""<table class="schedule-grid">
  <thead>
    <tr><th>{_escape(CORNER_LABEL)}</th>{header}</tr>
  </thead>
  <tbody>
    {rows}
  </tbody>
</table>"""


def render_schedule_html(schedule: Schedule) -> str:
    return f"""<div class="schedule">
<div class="table-scroll">
{_render_meta_table(schedule)}
</div>
<div class="table-scroll">
{render_grid_table(schedule)}
</div>
</div>"""
