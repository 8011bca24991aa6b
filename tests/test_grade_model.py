from __future__ import annotations

import datetime

import pydantic as p
import pytest

from moyenne.model import Grade, Scale, ScoredValue, Target

PORTAL_RECORD = {
    "id": "42#7",
    "subjectId": "MATHS",
    "subjectName": "Mathématiques",
    "subjectCoefficient": 4,
    "title": "Contrôle chapitre 3",
    "timestamp": "2024-10-03T08:00:00Z",
    "coefficient": 2,
    "outOf": {"value": 40},
    "student": {"value": "31.5"},
    "average": {"value": 24.25},
    "min": {"value": None, "disabled": True},
    "max": {"value": 38},
    "isBonus": False,
    "isOptional": True,
}


class TestGrade(object):
    def test_parses_portal_record(self) -> None:
        """camelCase records from the portal adapters are accepted."""
        grade = Grade.model_validate(PORTAL_RECORD)

        assert grade.subject_key == "MATHS"
        assert grade.out_of == Scale(value=40.0)
        assert grade.student.value == 31.5
        assert grade.score(Target.Max).value == 38.0
        assert grade.score(Target.Min).disabled
        assert grade.is_optional
        assert grade.timestamp == datetime.datetime(2024, 10, 3, 8, 0, tzinfo=datetime.UTC)

    def test_dumps_by_alias(self) -> None:
        """Serialized grades use the portal's field names again."""
        dumped = Grade.model_validate(PORTAL_RECORD).model_dump(mode="json")

        assert dumped["subjectId"] == "MATHS"
        assert dumped["outOf"] == {"value": 40.0}
        assert "subject_id" not in dumped

    def test_keeps_status_strings(self) -> None:
        """Non-numeric marks such as "Abs" are kept but are not numeric."""
        score = ScoredValue(value="Abs", status="Absent")

        assert score.value == "Abs"
        assert not score.is_numeric
        assert not ScoredValue(value=float("nan")).is_numeric
        assert ScoredValue(value=0).is_numeric

    def test_requires_a_subject(self) -> None:
        """A grade that cannot be grouped is rejected."""
        with pytest.raises(p.ValidationError, match="subject_id or a subject_name"):
            Grade(timestamp=datetime.datetime(2024, 10, 3))

    def test_is_frozen(self) -> None:
        """Grades are never mutated."""
        grade = Grade(subject_name="Anglais", timestamp=datetime.datetime(2024, 10, 3))

        with pytest.raises(p.ValidationError):
            grade.coefficient = 3  # type: ignore[misc]

    def test_defaults(self) -> None:
        """Only the student score is enabled by default, on a 20-point scale."""
        grade = Grade(subject_name="Anglais", timestamp=datetime.datetime(2024, 10, 3))

        assert grade.out_of.value == 20.0
        assert grade.coefficient == 1.0
        assert not grade.student.disabled
        assert all(grade.score(target).disabled for target in (Target.Average, Target.Min, Target.Max))

    @pytest.mark.parametrize("value, usable", [(20, True), (0.5, True), (0, False), (-10, False), (None, False)])
    def test_usable_scales(self, value: float | None, usable: bool) -> None:
        """Only positive scales can be averaged against."""
        assert Scale(value=value).is_usable is usable


class TestGradeIdentity(object):
    def test_same_id_matches(self) -> None:
        """Grades refreshed from the portal keep their identity."""
        a = Grade.model_validate(PORTAL_RECORD)
        b = Grade.model_validate({**PORTAL_RECORD, "title": "Contrôle chapitre 3 (rattrapage)"})

        assert a.matches(b)

    def test_different_ids_do_not_match(self) -> None:
        """Identical content under two ids are two grades."""
        a = Grade.model_validate(PORTAL_RECORD)
        b = Grade.model_validate({**PORTAL_RECORD, "id": "42#8"})

        assert not a.matches(b)

    def test_falls_back_to_content(self) -> None:
        """Without ids, grades are compared field by field."""
        record = {k: v for k, v in PORTAL_RECORD.items() if k != "id"}
        a = Grade.model_validate(record)

        assert a.matches(Grade.model_validate(record))
        assert not a.matches(Grade.model_validate({**record, "coefficient": 1}))
