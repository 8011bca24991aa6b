"""Averaging strategies.

Two school-portal conventions live here side by side:

- ``StrictAveraging``: every grade is rescaled to 20 and weighted by its
  coefficient, the subject average is rounded to two decimals.
- ``ExtendedAveraging``: bonus grades only count above half of their scale,
  optional grades are dropped when they would lower the average, and points
  are summed against their own scale unless the grade needs rescaling. The
  result is clamped to 20. With ``use_math`` grades are averaged as raw
  weighted values instead.

Strategies raise ``AveragingError`` subclasses; the operations in
``moyenne.averaging.engine`` turn those into the ``NO_AVERAGE`` sentinel.
"""

from __future__ import annotations

import abc
import decimal
import math
import typing as t

from moyenne.model import AveragingMethod, Grade, SubjectWeighting, Target

from .errors import AveragingError, MissingScaleError

NO_AVERAGE: t.Final[float] = -1.0
SCALE: t.Final[float] = 20.0

CENTS = decimal.Decimal("0.01")


def round_half_up(value: float) -> float:
    """Round to two decimals, exact halves away from zero"""
    if not math.isfinite(value):
        return value
    return float(decimal.Decimal(value).quantize(CENTS, rounding=decimal.ROUND_HALF_UP))


def group_by_subject(grades: t.Iterable[Grade]) -> dict[str, list[Grade]]:
    groups: dict[str, list[Grade]] = {}
    for grade in grades:
        groups.setdefault(grade.subject_key, []).append(grade)
    return groups


def contributing_value(grade: Grade, target: Target) -> float | None:
    """The target score of `grade` if it takes part in an average, else None"""
    score = grade.score(target)
    if score.disabled or not score.is_numeric or grade.coefficient == 0:
        return None
    value = t.cast(float, score.value)
    if value < 0:
        return None
    return value


def scale_of(grade: Grade) -> float:
    if not grade.out_of.is_usable:
        raise MissingScaleError(grade.subject_key, grade.id)
    return t.cast(float, grade.out_of.value)


class AveragingStrategy(abc.ABC):
    method: t.ClassVar[AveragingMethod]
    default_weighting: t.ClassVar[SubjectWeighting]

    weighting: SubjectWeighting

    def __init__(self, weighting: SubjectWeighting | None = None):
        self.weighting = weighting or self.default_weighting

    @abc.abstractmethod
    def subject_average(self, grades: t.Sequence[Grade], target: Target) -> float:
        """Average of one subject's grades on a 20-point scale, NO_AVERAGE when none count"""
        ...

    def overall_average(self, grades: t.Sequence[Grade], target: Target) -> float:
        weighted_sum = 0.0
        total_weight = 0.0
        averages: list[float] = []

        for subject_grades in group_by_subject(grades).values():
            try:
                average = self.subject_average(subject_grades, target)
            except AveragingError:
                # the subject is left out, the other subjects still count
                continue
            if average == NO_AVERAGE:
                continue
            weight = self.subject_weight(subject_grades)
            weighted_sum += average * weight
            total_weight += weight
            averages.append(average)

        if self.weighting is SubjectWeighting.Unweighted:
            if not averages:
                return NO_AVERAGE
            return sum(averages) / len(averages)

        if total_weight == 0:
            return NO_AVERAGE
        return round_half_up(weighted_sum / total_weight)

    def subject_weight(self, grades: t.Sequence[Grade]) -> float:
        match self.weighting:
            case SubjectWeighting.SubjectCoefficient:
                # a missing or zero coefficient counts as 1
                return grades[0].subject_coefficient or 1.0
            case SubjectWeighting.GradeCoefficients:
                return sum(g.coefficient for g in grades)
            case SubjectWeighting.Unweighted:
                return 1.0

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} weighting={self.weighting.value}>"


class StrictAveraging(AveragingStrategy):
    method = AveragingMethod.Strict
    default_weighting = SubjectWeighting.SubjectCoefficient

    def subject_average(self, grades: t.Sequence[Grade], target: Target) -> float:
        weighted_sum = 0.0
        total_coefficient = 0.0

        for grade in grades:
            value = contributing_value(grade, target)
            if value is None:
                continue

            out_of = scale_of(grade)
            normalized = value / out_of * SCALE if out_of != SCALE else value

            weighted_sum += normalized * grade.coefficient
            total_coefficient += grade.coefficient

        if total_coefficient == 0:
            return NO_AVERAGE
        return round_half_up(weighted_sum / total_coefficient)


class ExtendedAveraging(AveragingStrategy):
    method = AveragingMethod.Extended
    default_weighting = SubjectWeighting.Unweighted

    use_math: bool

    def __init__(self, use_math: bool = False, weighting: SubjectWeighting | None = None):
        super().__init__(weighting=weighting)
        self.use_math = use_math

    def subject_average(self, grades: t.Sequence[Grade], target: Target) -> float:
        return self._average(grades, target, resolved=False)

    def _average(self, grades: t.Sequence[Grade], target: Target, resolved: bool) -> float:
        grades_sum = 0.0
        denominator = 0.0
        counted = 0.0

        for grade in grades:
            value = contributing_value(grade, target)
            if value is None:
                continue

            coefficient = grade.coefficient
            out_of = scale_of(grade)

            if grade.is_optional and not resolved and self._lowers_average(grade, grades, target):
                continue

            if grade.is_bonus:
                adjusted = value - out_of / 2
                if adjusted < 0:
                    continue
                grades_sum += adjusted
                denominator += 1
                counted += 1
            elif self.use_math:
                grades_sum += value * coefficient
                counted += coefficient
            elif value > SCALE or (coefficient < 1 and out_of - SCALE >= -5) or out_of > SCALE:
                grades_sum += value / out_of * SCALE * coefficient
                denominator += SCALE * coefficient
            else:
                grades_sum += value * coefficient
                denominator += out_of * coefficient

        if self.use_math:
            if counted == 0:
                return NO_AVERAGE
            result = grades_sum / counted
            return NO_AVERAGE if math.isnan(result) else result

        if denominator == 0:
            return NO_AVERAGE
        result = grades_sum / denominator * SCALE
        if math.isnan(result):
            return NO_AVERAGE
        return min(result, SCALE)

    def _lowers_average(self, grade: Grade, grades: t.Sequence[Grade], target: Target) -> bool:
        # both passes run resolved so other optional grades are taken as-is
        without = self._average([g for g in grades if not g.matches(grade)], target, resolved=True)
        with_ = self._average(grades, target, resolved=True)
        return without > with_

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} weighting={self.weighting.value} use_math={self.use_math}>"
