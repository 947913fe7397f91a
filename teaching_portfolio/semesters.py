from __future__ import annotations

import logging
from typing import Mapping

from .content import LessonPlan, Schedule, Semester

log = logging.getLogger(__name__)


class UnknownSemesterError(KeyError):
  pass


class SemesterSelector:
  def __init__(self, semesters: Mapping[str, Semester], initial_key: str | None = None):
    if not semesters:
      raise ValueError("SemesterSelector needs at least one semester.")
    self._semesters = dict(semesters)
    self._key = self._check_key(initial_key if initial_key is not None else next(iter(self._semesters)))

  def _check_key(self, key: str) -> str:
    if key not in self._semesters:
      raise UnknownSemesterError(
        f"Unknown semester {key!r}. Valid: {list(self._semesters.keys())}"
      )
    return key

  @property
  def keys(self) -> list[str]:
    return list(self._semesters.keys())

  @property
  def current_key(self) -> str:
    return self._key

  @property
  def current(self) -> Semester:
    return self._semesters[self._key]

  @property
  def schedule(self) -> Schedule:
    return self.current.schedule

  @property
  def lesson_plans(self) -> tuple[LessonPlan, ...]:
    return self.current.lesson_plans

  @property
  def teaching_project_url(self) -> str | None:
    return self.current.teaching_project_url

  def select(self, key: str) -> Semester:
    self._key = self._check_key(key)
    log.debug("Selected semester %s", key)
    return self.current

  def tabs(self) -> list[tuple[str, str, bool]]:
    return [
      (key, semester.label, key == self._key)
      for key, semester in self._semesters.items()
    ]
