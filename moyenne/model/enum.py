import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Sandbox = "sandbox"
    Test = "test"
    Local = "local"


class Target(enum.Enum):
    """Which of a grade's scores a computation reads"""

    Student = "student"
    Average = "average"
    Min = "min"
    Max = "max"


class AveragingMethod(enum.Enum):
    Strict = "strict"
    Extended = "extended"


class SubjectWeighting(enum.Enum):
    """How subject averages are combined into an overall average"""

    SubjectCoefficient = "subject_coefficient"
    GradeCoefficients = "grade_coefficients"
    Unweighted = "unweighted"
