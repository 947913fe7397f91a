from __future__ import annotations

import json

import pytest

from teaching_portfolio.content import (
    DEFAULT_BADGES,
    ContentError,
    ContentLoadError,
    load_content_file,
    load_portfolio,
    normalize_portfolio,
    portfolio_to_dict,
    validate_content,
)


def _base_content() -> dict:
    return {
        "site": {
            "title": "Portfolio",
            "author": {"name": "Student Teacher", "email": "student@example.com"},
        },
        "activities": [
            {
                "id": "orientation",
                "title": "Orientation",
                "date": "16 May",
                "location": "Hall",
                "description": "Met the mentors.",
                "images": ["/images/a.jpg", None, "images/b.jpg"],
                "highlights": ["Rules", "  ", "Mentors"],
            }
        ],
        "semesters": {
            "1/2568": {
                "label": "Semester 1/2568",
                "teaching_project_url": "/docs/project.pdf",
                "schedule": {
                    "meta": {"school": "College", "group_code": 6820401},
                    "subjects": [{"code": "20204-2001", "name": "Computers", "tpn": "1-2-2"}],
                    "periods": [
                        {"key": "p1", "label": "1", "time": "08:30-09:30"},
                        {"key": "lunch", "label": "", "time": "11:30-12:30", "is_break": True},
                        {"key": "p2", "label": "2", "time": "12:30-13:30"},
                    ],
                    "days": [{"key": "mon", "label": "Monday"}],
                    "grid": {"mon": {"p1": {"code": "20204-2001", "room": "341"}, "p2": None}},
                },
                "lesson_plans": [
                    {
                        "id": "plan-1",
                        "subject": "Computers",
                        "topic": "Hardware",
                        "download_url": "/docs/plan-1.pdf",
                    }
                ],
            },
            "2/2568": {
                "label": "Semester 2/2568",
                "lessonPlans": [
                    {
                        "id": "plan-2",
                        "subject": "Typing",
                        "topic": "Home row",
                        "downloadUrl": "https://example.com/plan-2.pdf",
                    }
                ],
                "teachingProjectUrl": None,
            },
        },
    }


def test_normalize_portfolio_builds_records():
    portfolio = normalize_portfolio(_base_content())

    assert portfolio.default_semester == "1/2568"
    assert list(portfolio.semesters) == ["1/2568", "2/2568"]

    activity = portfolio.activities[0]
    assert activity.images == ("/images/a.jpg", "images/b.jpg")
    assert activity.highlights == ("Rules", "Mentors")

    semester = portfolio.semesters["1/2568"]
    assert semester.teaching_project_url == "/docs/project.pdf"
    assert semester.schedule.meta.group_code == "6820401"
    assert semester.schedule.periods[1].is_break is True
    assert semester.schedule.cell_at("mon", "p1").room == "341"
    assert semester.schedule.cell_at("mon", "p2") is None
    assert semester.schedule.cell_at("tue", "p1") is None
    assert semester.lesson_plans[0].download_url == "/docs/plan-1.pdf"


def test_normalize_portfolio_accepts_camel_case_aliases():
    portfolio = normalize_portfolio(_base_content())
    semester = portfolio.semesters["2/2568"]

    assert semester.lesson_plans[0].download_url == "https://example.com/plan-2.pdf"
    assert semester.teaching_project_url is None
    assert semester.schedule.periods == ()
    assert semester.schedule.days == ()


def test_normalize_portfolio_treats_non_list_fields_as_empty():
    content = _base_content()
    content["activities"][0]["images"] = "not-a-list"
    content["activities"][0]["highlights"] = {"oops": True}
    content["semesters"]["1/2568"]["schedule"]["subjects"] = "none"

    portfolio = normalize_portfolio(content)

    assert portfolio.activities[0].images == ()
    assert portfolio.activities[0].highlights == ()
    assert portfolio.semesters["1/2568"].schedule.subjects == ()


def test_normalize_portfolio_profile_defaults():
    content = _base_content()
    del content["site"]
    portfolio = normalize_portfolio(content)

    assert portfolio.profile.badges == DEFAULT_BADGES
    assert portfolio.profile.author_name is None


def test_normalize_portfolio_respects_default_semester():
    content = _base_content()
    content["defaultSemester"] = "2/2568"
    assert normalize_portfolio(content).default_semester == "2/2568"

    content["defaultSemester"] = "3/2568"
    with pytest.raises(ContentError, match="3/2568"):
        normalize_portfolio(content)


def test_normalize_portfolio_requires_a_semester():
    content = _base_content()
    content["semesters"] = {}
    with pytest.raises(ContentError, match="At least one semester"):
        normalize_portfolio(content)


def test_normalize_portfolio_rejects_duplicate_activity_ids():
    content = _base_content()
    content["activities"].append(dict(content["activities"][0]))
    with pytest.raises(ContentError, match="orientation"):
        normalize_portfolio(content)


def test_validate_content_accepts_base_content():
    assert validate_content(_base_content()) == []


def test_validate_content_reports_paths_of_bad_fields():
    content = _base_content()
    content["activities"][0]["images"] = "not-a-list"
    content["semesters"]["1/2568"]["schedule"]["grid"]["mon"]["p1"]["span"] = 0

    errors = validate_content(content)

    assert any(error.startswith("$.activities[0].images") for error in errors)
    assert any("$.semesters.1/2568.schedule.grid.mon.p1" in error for error in errors)


def test_load_portfolio_strict_raises_content_error(tmp_path):
    content = _base_content()
    del content["semesters"]["1/2568"]["label"]
    path = tmp_path / "content.json"
    path.write_text(json.dumps(content), encoding="utf-8")

    with pytest.raises(ContentError, match="label"):
        load_portfolio(path)

    portfolio = load_portfolio(path, strict=False)
    assert portfolio.semesters["1/2568"].label == "1/2568"


def test_load_portfolio_reads_yaml(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_text(
        "semesters:\n"
        "  '1/2568':\n"
        "    label: Semester one\n",
        encoding="utf-8",
    )
    portfolio = load_portfolio(path)
    assert portfolio.semesters["1/2568"].label == "Semester one"
    assert portfolio.activities == ()


def test_load_portfolio_rejects_non_mapping(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ContentLoadError, match="mapping"):
        load_portfolio(path)


@pytest.mark.parametrize(
    "name, text, match",
    [
        ("content.yaml", "semesters: [unclosed\n", "YAML parse error"),
        ("content.json", "{\"semesters\": ", "JSON parse error"),
    ],
)
def test_load_content_file_wraps_parse_errors(tmp_path, name, text, match):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ContentLoadError, match=match) as excinfo:
        load_content_file(path)
    assert isinstance(excinfo.value, ContentError)
    assert excinfo.value.__cause__ is not None


def test_portfolio_to_dict_is_json_serializable():
    data = portfolio_to_dict(normalize_portfolio(_base_content()))
    encoded = json.dumps(data, ensure_ascii=False)
    assert "Semester 1/2568" in encoded
    assert data["semesters"]["1/2568"]["schedule"]["grid"]["mon"]["p1"]["code"] == "20204-2001"
