"""Exceptions for averaging operations."""


class AveragingError(Exception):
    """An average could not be computed from the given grades."""

    pass


class MissingScaleError(AveragingError):
    """A contributing grade has no usable scale (out_of) value."""

    def __init__(self, subject: str, grade_id: str | None = None):
        self.subject = subject
        self.grade_id = grade_id
        super().__init__(f"grade {grade_id or '<no id>'} in subject {subject!r} has no usable scale")
