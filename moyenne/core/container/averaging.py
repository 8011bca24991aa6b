"""Averaging container for dependency injection."""

from __future__ import annotations

import typing as t

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Provider, Singleton

from moyenne.averaging import AveragingEngine, AveragingStrategy, get_strategy
from moyenne.model import AveragingMethod

from ..config import AveragingSettings
from ..provider import TimestampProvider


def create_strategy(config: dict[str, t.Any]) -> AveragingStrategy:
    """Build the configured averaging strategy.

    Args:
        config: the `averaging` configuration section

    Returns:
        A strict or extended strategy; `use_math` only applies to the latter
    """
    settings = AveragingSettings(**config)
    options: dict[str, t.Any] = {"weighting": settings.weighting}
    if settings.method is AveragingMethod.Extended:
        options["use_math"] = settings.use_math
    return get_strategy(settings.method, **options)


def create_engine(
    config: dict[str, t.Any], strategy: AveragingStrategy, utcnow: TimestampProvider
) -> AveragingEngine:
    settings = AveragingSettings(**config)
    return AveragingEngine(strategy, target=settings.target, utcnow=utcnow)


class AveragingContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    utcnow: Dependency[TimestampProvider] = Dependency()

    strategy: Provider[AveragingStrategy] = Singleton(create_strategy, config=config)
    engine: Provider[AveragingEngine] = Singleton(create_engine, config=config, strategy=strategy, utcnow=utcnow)
