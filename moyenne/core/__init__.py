__all__ = [
    "AveragingContainer",
    "BootConfiguration",
    "di",
    "LoggingProvider",
    "MoyenneContainer",
    "Settings",
    "TimestampProvider",
]


from . import di
from .config import Settings
from .container import AveragingContainer, BootConfiguration, MoyenneContainer
from .provider import LoggingProvider, TimestampProvider
