"""Averaging configuration settings."""

from __future__ import annotations

from moyenne.model import AveragingMethod, SubjectWeighting, Target

from .base import BaseSettings


class AveragingSettings(BaseSettings):
    """Which averaging convention the engine applies by default."""

    method: AveragingMethod = AveragingMethod.Strict
    target: Target = Target.Student

    # extended method only: average raw weighted values, no rescaling or clamping
    use_math: bool = False

    # None picks the method's own default (strict: subject_coefficient, extended: unweighted)
    weighting: SubjectWeighting | None = None
