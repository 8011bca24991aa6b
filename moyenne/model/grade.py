from __future__ import annotations

import datetime
import math
import typing as t

import pydantic as p
from pydantic.alias_generators import to_camel

from .base import FrozenModel
from .enum import Target

# numeric strings are coerced to float, anything else (e.g. "Abs") is kept as-is
ScoreValue = t.Annotated[float | str | None, p.Field(union_mode="left_to_right")]


class ScoredValue(FrozenModel):
    value: ScoreValue = None
    disabled: bool = False
    status: str | None = None

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, float) and not math.isnan(self.value)


class Scale(FrozenModel):
    value: float | None = None

    @property
    def is_usable(self) -> bool:
        return self.value is not None and not math.isnan(self.value) and self.value > 0


class Grade(FrozenModel):
    """A single grade as normalized by a school portal adapter"""

    model_config = p.ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str | None = None
    subject_id: str | None = None
    subject_name: str | None = None
    subject_coefficient: float | None = None

    title: str | None = None
    description: str | None = None
    timestamp: datetime.datetime

    coefficient: float = 1.0
    out_of: Scale = Scale(value=20.0)

    student: ScoredValue = ScoredValue()
    average: ScoredValue = ScoredValue(disabled=True)
    min: ScoredValue = ScoredValue(disabled=True)
    max: ScoredValue = ScoredValue(disabled=True)

    is_bonus: bool = False
    is_optional: bool = False

    @p.model_validator(mode="after")
    def check_subject_key(self) -> t.Self:
        if not (self.subject_id or self.subject_name):
            raise ValueError("grade must carry a subject_id or a subject_name")
        return self

    @property
    def subject_key(self) -> str:
        return t.cast(str, self.subject_id or self.subject_name)

    def score(self, target: Target) -> ScoredValue:
        return getattr(self, target.value)

    def matches(self, other: Grade) -> bool:
        """Identity by portal id when both grades carry one, by content otherwise"""
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self == other
