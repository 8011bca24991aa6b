from __future__ import annotations

import datetime
import logging
import math
import typing as t

from moyenne.lib.util import utc_isoformat
from moyenne.model import AverageDiffGrade, AveragingMethod, Grade, GradeHistory, Target

from .errors import AveragingError
from .strategy import AveragingStrategy, ExtendedAveraging, NO_AVERAGE, round_half_up, StrictAveraging

logger = logging.getLogger(__name__)

Clock = t.Callable[[], datetime.datetime]
MethodLike = AveragingMethod | AveragingStrategy


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def get_strategy(method: AveragingMethod, **options: t.Any) -> AveragingStrategy:
    match method:
        case AveragingMethod.Strict:
            return StrictAveraging(**options)
        case AveragingMethod.Extended:
            return ExtendedAveraging(**options)


def _strategy(method: MethodLike) -> AveragingStrategy:
    if isinstance(method, AveragingStrategy):
        return method
    return get_strategy(method)


def subject_average(
    grades: t.Sequence[Grade],
    target: Target = Target.Student,
    method: MethodLike = AveragingMethod.Strict,
) -> float:
    """
    Average of a single subject's grades on a 20-point scale.

    The caller is responsible for passing grades of one subject only. Returns
    NO_AVERAGE (-1) when no grade counts or when the grades cannot be averaged.
    """
    if not grades:
        return NO_AVERAGE
    strategy = _strategy(method)
    try:
        return strategy.subject_average(grades, target)
    except (AveragingError, ArithmeticError) as ex:
        logger.debug(
            "subject average not computable",
            extra={"strategy": repr(strategy), "target": target.value, "grades": len(grades), "reason": str(ex)},
        )
        return NO_AVERAGE


def overall_average(
    grades: t.Sequence[Grade],
    target: Target = Target.Student,
    method: MethodLike = AveragingMethod.Strict,
) -> float:
    """
    Average across subjects; subjects without an average are left out
    entirely. How subjects are weighted is decided by the strategy's
    `weighting`.
    """
    if not grades:
        return NO_AVERAGE
    strategy = _strategy(method)
    try:
        return strategy.overall_average(grades, target)
    except (AveragingError, ArithmeticError) as ex:
        logger.debug(
            "overall average not computable",
            extra={"strategy": repr(strategy), "target": target.value, "grades": len(grades), "reason": str(ex)},
        )
        return NO_AVERAGE


def average_diff(
    target_grades: t.Sequence[Grade],
    context_grades: t.Sequence[Grade],
    target: Target = Target.Student,
    method: MethodLike = AveragingMethod.Strict,
) -> AverageDiffGrade:
    """
    Effect of the first grade in `target_grades` on the average of
    `context_grades`. A positive difference means the average would go up
    without the grade.
    """
    strategy = _strategy(method)
    try:
        grade = target_grades[0]
        with_ = subject_average(context_grades, target, strategy)
        without = subject_average([g for g in context_grades if not g.matches(grade)], target, strategy)
        return AverageDiffGrade(difference=round_half_up(without - with_), with_=with_, without=without)
    except (IndexError, ArithmeticError) as ex:
        logger.debug("average diff not computable", extra={"strategy": repr(strategy), "reason": str(ex)})
        return AverageDiffGrade(difference=0.0, with_=0.0, without=0.0)


def averages_history(
    grades: t.Sequence[Grade],
    target: Target = Target.Student,
    final: float | None = None,
    method: MethodLike = AveragingMethod.Strict,
    now: Clock = utcnow,
) -> list[GradeHistory]:
    """
    Overall average after each grade, ordered by date, followed by a point
    for the current time carrying `final` (or the average of all grades).
    """
    if not grades:
        return []
    strategy = _strategy(method)
    try:
        history = [
            GradeHistory(value=overall_average(grades[: i + 1], target, strategy), date=utc_isoformat(grade.timestamp))
            for i, grade in enumerate(grades)
        ]
        history.sort(key=lambda point: point.date)
        history.append(
            GradeHistory(
                value=final if final is not None else overall_average(grades, target, strategy),
                date=utc_isoformat(now()),
            )
        )
    except (ValueError, OverflowError) as ex:
        logger.debug("averages history not computable", extra={"strategy": repr(strategy), "reason": str(ex)})
        return []
    return [point for point in history if not math.isnan(point.value)]


class AveragingEngine(object):
    """The four averaging operations bound to one strategy, target and clock"""

    def __init__(self, strategy: AveragingStrategy, target: Target = Target.Student, utcnow: Clock = utcnow):
        self.strategy = strategy
        self.target = target
        self.utcnow = utcnow

    def subject_average(self, grades: t.Sequence[Grade], target: Target | None = None) -> float:
        return subject_average(grades, target or self.target, self.strategy)

    def overall_average(self, grades: t.Sequence[Grade], target: Target | None = None) -> float:
        return overall_average(grades, target or self.target, self.strategy)

    def average_diff(
        self, target_grades: t.Sequence[Grade], context_grades: t.Sequence[Grade], target: Target | None = None
    ) -> AverageDiffGrade:
        return average_diff(target_grades, context_grades, target or self.target, self.strategy)

    def averages_history(
        self, grades: t.Sequence[Grade], target: Target | None = None, final: float | None = None
    ) -> list[GradeHistory]:
        return averages_history(grades, target or self.target, final, self.strategy, now=self.utcnow)

    def __repr__(self) -> str:
        return f"<AveragingEngine {self.strategy!r} target={self.target.value}>"
