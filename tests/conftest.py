"""Pytest fixtures for moyenne tests.

Grades are built with `grade_factory`, which fills in a subject, a 20-point
scale and a timestamp one day after the previous grade so tests only spell out
what they exercise.

Usage:
    def test_single_grade(grade_factory: t.Callable[..., Grade]):
        grade = grade_factory(15, out_of=20, coefficient=2)
"""

from __future__ import annotations

import datetime
import itertools
import typing as t
from pathlib import Path

import pytest

import moyenne
from moyenne.model import Grade, Scale, ScoredValue

FIRST_DAY = datetime.datetime(2024, 9, 2, 8, 0, tzinfo=datetime.UTC)


@pytest.fixture
def grade_factory() -> t.Callable[..., Grade]:
    """Factory fixture for grades with sensible defaults."""
    counter = itertools.count(1)

    def create_grade(
        student: float | str | None = 15.0,
        *,
        out_of: float | None = 20.0,
        coefficient: float = 1.0,
        subject: str = "maths",
        subject_coefficient: float | None = None,
        average: float | None = None,
        min: float | None = None,
        max: float | None = None,
        disabled: bool = False,
        is_bonus: bool = False,
        is_optional: bool = False,
        timestamp: datetime.datetime | None = None,
        identified: bool = True,
    ) -> Grade:
        n = next(counter)

        def score(value: float | None) -> ScoredValue:
            return ScoredValue(value=value, disabled=value is None)

        return Grade(
            id=f"grade-{n}" if identified else None,
            subject_id=subject,
            subject_name=subject.title(),
            subject_coefficient=subject_coefficient,
            title=f"Test grade {n}",
            timestamp=timestamp or FIRST_DAY + datetime.timedelta(days=n),
            coefficient=coefficient,
            out_of=Scale(value=out_of),
            student=ScoredValue(value=student, disabled=disabled),
            average=score(average),
            min=score(min),
            max=score(max),
            is_bonus=is_bonus,
            is_optional=is_optional,
        )

    return create_grade


@pytest.fixture
def fixed_clock() -> t.Callable[[], datetime.datetime]:
    """A clock frozen at the start of 2025."""
    return lambda: datetime.datetime(2025, 1, 1, 12, 0, tzinfo=datetime.UTC)


@pytest.fixture(scope="session")
def config_root() -> Path:
    """The repository's YAML configuration directory."""
    return Path(moyenne.__file__).resolve().parents[1] / "config"
