import pydantic as p

from .base import FrozenModel


class GradeHistory(FrozenModel):
    value: float
    date: str


class AverageDiffGrade(FrozenModel):
    difference: float = 0.0
    with_: float = p.Field(default=0.0, alias="with")
    without: float = 0.0
