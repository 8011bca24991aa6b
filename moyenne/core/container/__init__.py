__all__ = [
    "AveragingContainer",
    "BootConfiguration",
    "MoyenneContainer",
]

from .averaging import AveragingContainer
from .moyenne import BootConfiguration, MoyenneContainer
