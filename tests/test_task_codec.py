# tests/test_task_codec.py

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from daily_planner.errors import MissingFieldError
from daily_planner.tasks.task_codec import (
    decode_category,
    decode_day,
    decode_task,
    encode_category,
    encode_day,
    encode_task,
)
from daily_planner.tasks.task_models import Category, Day, Priority, Task

CREATED = datetime(2026, 10, 1, 8, 30, 15, 123456, tzinfo=UTC)


def _task(**overrides) -> Task:
    fields = dict(
        id="6f1c2d3e-0000-4000-8000-000000000001",
        title="Pay rent",
        priority=Priority.HIGH,
        category="home",
        completed=False,
        created_at=CREATED,
        updated_at=CREATED,
    )
    fields.update(overrides)
    return Task(**fields)


def test_task_round_trip_with_all_fields() -> None:
    task = _task(
        description="transfer before the 5th",
        due_date=datetime(2026, 10, 5, 23, 59, 59, tzinfo=UTC),
        is_daily=True,
        completed=True,
    )
    assert decode_task(encode_task(task)) == task


def test_task_round_trip_with_optional_fields_absent() -> None:
    task = _task()
    text = encode_task(task)
    assert "description" not in text
    assert "due_date" not in text
    assert decode_task(text) == task


def test_task_encoding_is_one_key_per_line() -> None:
    lines = encode_task(_task(description="d")).splitlines()
    assert lines[0] == "id: 6f1c2d3e-0000-4000-8000-000000000001"
    assert lines[1] == "title: Pay rent"
    assert "priority: High" in lines
    assert "created_at: 2026-10-01T08:30:15.123456+00:00" in lines


def test_multiline_description_keeps_only_first_line() -> None:
    task = _task(description="first line\nsecond line")
    decoded = decode_task(encode_task(task))
    assert decoded.description == "first line"


def test_decode_ignores_unknown_keys_and_junk_lines() -> None:
    text = encode_task(_task()) + "colour: blue\nnot a field line\n"
    assert decode_task(text) == _task()


@pytest.mark.parametrize("field", ["id", "title"])
def test_decode_task_missing_required_field(field: str) -> None:
    lines = [ln for ln in encode_task(_task()).splitlines() if not ln.startswith(f"{field}: ")]
    with pytest.raises(MissingFieldError) as exc:
        decode_task("\n".join(lines))
    assert exc.value.field == field


def test_decode_task_invalid_priority_falls_back_to_medium() -> None:
    text = encode_task(_task()).replace("priority: High", "priority: urgent!!")
    assert decode_task(text).priority is Priority.MEDIUM


def test_decode_task_drops_unparseable_due_date() -> None:
    text = encode_task(_task()) + "due_date: next tuesday\n"
    decoded = decode_task(text)
    assert decoded.due_date is None


def test_timestamps_without_offset_are_utc() -> None:
    text = encode_task(_task()).replace(CREATED.isoformat(), "2026-10-01T08:30:15") + "due_date: 2026-10-20T23:30:00\n"
    decoded = decode_task(text)

    assert decoded.created_at == datetime(2026, 10, 1, 8, 30, 15, tzinfo=UTC)
    assert decoded.due_date == datetime(2026, 10, 20, 23, 30, tzinfo=UTC)
    assert decoded.is_due_on(date(2026, 10, 20))


def test_day_round_trips() -> None:
    full = Day(date=date(2026, 10, 19), task_ids=["a", "b"], notes="dentist at 3")
    empty = Day(date=date(2026, 10, 20))
    assert decode_day(encode_day(full)) == full
    assert decode_day(encode_day(empty)) == empty
    assert encode_day(empty) == "date: 2026-10-20\n"


def test_day_missing_date() -> None:
    with pytest.raises(MissingFieldError) as exc:
        decode_day("tasks: a,b\n")
    assert exc.value.field == "date"


def test_category_round_trips() -> None:
    full = Category(name="work", description="day job")
    bare = Category(name="home")
    assert decode_category(encode_category(full)) == full
    assert decode_category(encode_category(bare)) == bare
