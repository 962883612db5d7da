from __future__ import annotations

import json
from datetime import date
from itertools import count
from pathlib import Path

import pytest

from weekplan.models import DayPlan, PlanItem, WeeklyPlan
from weekplan.stores import DEFAULT_AVAILABILITY, AvailabilityStore, CourseStore, PlanStore


def _ids():
    counter = count(1)
    return lambda: f"id{next(counter)}"


def test_course_store_add_list_remove(tmp_path: Path) -> None:
    store = CourseStore(tmp_path / "courses.json", id_factory=_ids())

    first = store.add("  Algebra ", date(2026, 2, 1), difficulty=4, weight=2)
    second = store.add("Physics", date(2026, 1, 20))

    assert first.name == "Algebra"
    assert [course.course_id for course in store.load()] == ["id2", "id1"]
    assert [course.name for course in store.sorted_by_exam()] == ["Physics", "Algebra"]
    assert second.difficulty == 3 and second.weight == 3

    assert store.remove("id1") is True
    assert store.remove("missing") is False
    assert [course.course_id for course in store.load()] == ["id2"]

    store.clear()
    assert store.load() == []


@pytest.mark.parametrize(
    ("name", "difficulty", "message"),
    [("   ", 3, "Please enter a course name."), ("Chem", 0, "difficulty must be between 1 and 5")],
)
def test_course_store_rejects_bad_input(tmp_path: Path, name: str, difficulty: int, message: str) -> None:
    store = CourseStore(tmp_path / "courses.json")
    with pytest.raises(ValueError, match=message):
        store.add(name, date(2026, 2, 1), difficulty=difficulty)
    assert not (tmp_path / "courses.json").exists()


def test_course_store_generates_unique_ids(tmp_path: Path) -> None:
    store = CourseStore(tmp_path / "courses.json")
    ids = {store.add(f"Course {idx}", date(2026, 2, 1)).course_id for idx in range(5)}
    assert len(ids) == 5


def test_course_store_sample_is_relative_to_today(tmp_path: Path) -> None:
    store = CourseStore(tmp_path / "courses.json", id_factory=_ids())
    store.add("Old", date(2026, 1, 1))

    sample = store.add_sample(date(2026, 1, 5))

    assert [course.exam_date for course in sample] == [date(2026, 1, 15), date(2026, 1, 23), date(2026, 1, 19)]
    assert [course.name for course in store.load()] == ["Discrete Math", "Algorithms", "Databases"]


def test_course_store_skips_invalid_records(tmp_path: Path) -> None:
    path = tmp_path / "courses.json"
    path.write_text(
        json.dumps(
            {
                "courses": [
                    {"id": "a", "name": "A", "exam_date": "2026-02-01", "difficulty": 2, "weight": 2},
                    {"id": "b", "name": "", "exam_date": "2026-02-01", "difficulty": 2, "weight": 2},
                ]
            }
        ),
        encoding="utf-8",
    )
    courses, report = CourseStore(path).load_with_report()
    assert [course.course_id for course in courses] == ["a"]
    assert report.error_codes() == {"EMPTY_COURSE_NAME"}


def test_availability_store_set_and_reset(tmp_path: Path) -> None:
    store = AvailabilityStore(tmp_path / "availability.json")

    assert store.get("2026-01-05") is None
    assert store.get_or_default("2026-01-05") == DEFAULT_AVAILABILITY

    week = store.set_hours("2026-01-05", "Mon", 14)
    assert week["Mon"] == 10.0
    assert week["Sat"] == 3.0
    assert store.total_hours("2026-01-05") == 23.0

    assert store.reset_week("2026-01-05") == DEFAULT_AVAILABILITY
    assert store.total_hours("2026-01-05") == 15.0


def test_availability_store_rejects_bad_keys(tmp_path: Path) -> None:
    store = AvailabilityStore(tmp_path / "availability.json")
    with pytest.raises(ValueError, match="Monday"):
        store.set_hours("2026-01-06", "Mon", 2)
    with pytest.raises(ValueError, match="Unknown weekday"):
        store.set_hours("2026-01-05", "Monday", 2)


def test_availability_copy_from_previous_week(tmp_path: Path) -> None:
    store = AvailabilityStore(tmp_path / "availability.json")
    assert store.copy_from_previous("2026-01-12") is None

    store.set_hours("2025-12-29", "Mon", 1)
    store.set_hours("2026-01-05", "Mon", 4)

    copied = store.copy_from_previous("2026-01-12")
    assert copied is not None and copied["Mon"] == 4.0

    store.set_hours("2026-01-12", "Mon", 6)
    assert store.copy_from_previous("2026-01-05")["Mon"] == 1.0


def _plan(week_start: date) -> WeeklyPlan:
    days = [DayPlan(date=date.fromordinal(week_start.toordinal() + offset)) for offset in range(7)]
    days[0] = DayPlan(date=week_start, items=(PlanItem(course_id="a", course_name="A", minutes=90),))
    return WeeklyPlan(days=tuple(days))


def test_plan_store_replace_load_clear(tmp_path: Path) -> None:
    store = PlanStore(tmp_path / "plans" / "plan.json")
    assert store.load() is None

    store.replace(_plan(date(2026, 1, 5)))
    loaded = store.load()
    assert loaded is not None
    assert loaded.week_start == date(2026, 1, 5)
    assert loaded.total_minutes == 90
    assert loaded.days[0].items[0].course_name == "A"
    assert list((tmp_path / "plans").iterdir()) == [tmp_path / "plans" / "plan.json"]

    store.replace(_plan(date(2026, 1, 12)))
    assert store.load().week_start == date(2026, 1, 12)

    assert store.clear() is True
    assert store.clear() is False
    assert store.load() is None


def test_plan_store_ignores_corrupt_plan(tmp_path: Path) -> None:
    path = tmp_path / "plan.json"
    path.write_text(json.dumps({"plan": {"days": [{"date": "2026-01-05", "items": []}]}}), encoding="utf-8")
    assert PlanStore(path).load() is None


def test_weekly_plan_requires_seven_contiguous_days() -> None:
    with pytest.raises(ValueError, match="Monday"):
        _plan(date(2026, 1, 6))
    days = list(_plan(date(2026, 1, 5)).days)
    days[3] = DayPlan(date=date(2026, 1, 20))
    with pytest.raises(ValueError, match="contiguous"):
        WeeklyPlan(days=tuple(days))


def test_course_store_refuses_to_rewrite_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "courses.json"
    payload = {
        "courses": [
            {"id": "keep", "name": "Kept", "exam_date": "2026-02-01", "difficulty": 6, "weight": 2},
            {"id": "ok", "name": "Fine", "exam_date": "2026-02-01", "difficulty": 2, "weight": 2},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    store = CourseStore(path)

    with pytest.raises(ValueError, match="OUT_OF_RANGE"):
        store.add("Physics", date(2026, 2, 1))
    with pytest.raises(ValueError, match="invalid records"):
        store.remove("ok")

    assert json.loads(path.read_text(encoding="utf-8")) == payload
    assert [course.course_id for course in store.load()] == ["ok"]


def test_availability_store_refuses_to_rewrite_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "availability.json"
    payload = {"weeks": {"2026-01-05": {"Mon": 2, "Tue": "3"}}}
    path.write_text(json.dumps(payload), encoding="utf-8")
    store = AvailabilityStore(path)

    with pytest.raises(ValueError, match="INVALID_TYPE"):
        store.set_hours("2026-01-12", "Mon", 1)
    with pytest.raises(ValueError, match="invalid records"):
        store.reset_week("2026-01-12")
    with pytest.raises(ValueError, match="invalid records"):
        store.copy_from_previous("2026-01-12")

    assert json.loads(path.read_text(encoding="utf-8")) == payload
    assert store.get("2026-01-05") == {"Mon": 2.0}


def test_availability_store_writes_through_clamp_infos(tmp_path: Path) -> None:
    path = tmp_path / "availability.json"
    path.write_text(json.dumps({"weeks": {"2026-01-05": {"Mon": 14}}}), encoding="utf-8")

    AvailabilityStore(path).set_hours("2026-01-05", "Tue", 1)

    assert AvailabilityStore(path).get("2026-01-05") == {"Mon": 10.0, "Tue": 1.0}
