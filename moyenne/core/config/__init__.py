__all__ = [
    "AveragingSettings",
    "LoggingSettings",
    "Settings",
]


from .averaging import AveragingSettings
from .logging import LoggingSettings
from .settings import Settings
