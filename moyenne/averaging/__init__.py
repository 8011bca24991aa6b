__all__ = [
    "AveragingEngine",
    "AveragingError",
    "AveragingStrategy",
    "Clock",
    "ExtendedAveraging",
    "MissingScaleError",
    "NO_AVERAGE",
    "StrictAveraging",
    "average_diff",
    "averages_history",
    "get_strategy",
    "group_by_subject",
    "overall_average",
    "round_half_up",
    "subject_average",
]

from .engine import AveragingEngine, Clock, average_diff, averages_history, get_strategy, overall_average, \
    subject_average
from .errors import AveragingError, MissingScaleError
from .strategy import AveragingStrategy, ExtendedAveraging, group_by_subject, NO_AVERAGE, round_half_up, \
    StrictAveraging
