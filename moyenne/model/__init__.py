__all__ = [
    # Base
    "BaseModel",
    "FrozenModel",
    # Enums
    "AveragingMethod",
    "DeploymentEnvironment",
    "SubjectWeighting",
    "Target",
    # Grades
    "Grade",
    "Scale",
    "ScoredValue",
    # Averages
    "AverageDiffGrade",
    "GradeHistory",
]

from .average import AverageDiffGrade, GradeHistory
from .base import BaseModel, FrozenModel
from .enum import AveragingMethod, DeploymentEnvironment, SubjectWeighting, Target
from .grade import Grade, Scale, ScoredValue
