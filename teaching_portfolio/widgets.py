from __future__ import annotations

from typing import Iterable

from .content import Activity

DESCRIPTION_CLIP_THRESHOLD = 220


class Carousel:
  """Wrap-around image cursor for one activity card."""

  def __init__(self, images: Iterable[str | None] | None = None):
    self._images: tuple[str, ...] = ()
    self._index = 0
    self.replace_images(images)

  @property
  def images(self) -> tuple[str, ...]:
    return self._images

  @property
  def count(self) -> int:
    return len(self._images)

  @property
  def index(self) -> int:
    return self._index

  @property
  def current(self) -> str | None:
    if not self._images:
      return None
    return self._images[self._index]

  @property
  def shows_placeholder(self) -> bool:
    return self.count == 0

  @property
  def can_navigate(self) -> bool:
    return self.count > 1

  def next(self) -> int:
    if self.can_navigate:
      self._index = (self._index + 1) % self.count
    return self._index

  def prev(self) -> int:
    if self.can_navigate:
      self._index = (self._index - 1 + self.count) % self.count
    return self._index

  def replace_images(self, images: Iterable[str | None] | None) -> None:
    self._images = tuple(image for image in (images or ()) if image)
    self._index = max(0, min(self._index, self.count - 1))


class ExpandablePanel:
  """Clipped/full view of an activity description and its highlights."""

  def __init__(self, description: str | None, highlights: Iterable[str] | None = None):
    self.description = description if isinstance(description, str) else ""
    self.highlights: tuple[str, ...] = tuple(highlights or ())
    self.expanded = False

  @property
  def has_long_description(self) -> bool:
    return len(self.description) > DESCRIPTION_CLIP_THRESHOLD

  @property
  def has_highlights(self) -> bool:
    return len(self.highlights) > 0

  @property
  def can_expand(self) -> bool:
    return self.has_long_description or self.has_highlights

  @property
  def shows_fade(self) -> bool:
    return not self.expanded

  @property
  def visible_highlights(self) -> tuple[str, ...]:
    return self.highlights if self.expanded else ()

  def toggle(self) -> bool:
    if self.can_expand:
      self.expanded = not self.expanded
    return self.expanded


class ActivityCardState:
  def __init__(self, activity: Activity):
    self.activity_id = activity.id
    self.carousel = Carousel(activity.images)
    self.panel = ExpandablePanel(activity.description, activity.highlights)


class ActivityCardStates:
  """Per-activity UI state, created on first use and never shared between cards."""

  def __init__(self):
    self._states: dict[str, ActivityCardState] = {}

  def __len__(self) -> int:
    return len(self._states)

  def __contains__(self, activity_id: str) -> bool:
    return activity_id in self._states

  def state_for(self, activity: Activity) -> ActivityCardState:
    state = self._states.get(activity.id)
    if state is None:
      state = ActivityCardState(activity)
      self._states[activity.id] = state
    return state
