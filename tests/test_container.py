from __future__ import annotations

import datetime
import typing as t
from pathlib import Path

import pydantic as p
import pytest

from moyenne.averaging import AveragingEngine, ExtendedAveraging, StrictAveraging
from moyenne.core import AveragingContainer, MoyenneContainer
from moyenne.model import DeploymentEnvironment, Grade, SubjectWeighting, Target


@pytest.fixture
def container() -> t.Iterator[MoyenneContainer]:
    ct = MoyenneContainer()
    yield ct
    ct.shutdown_resources()


class TestAveragingContainer(object):
    def test_builds_configured_strategy(self, fixed_clock: t.Callable[[], datetime.datetime]) -> None:
        """Configuration picks the strategy and its options."""
        ct = AveragingContainer(utcnow=fixed_clock)
        ct.config.from_dict({"method": "extended", "use_math": True, "weighting": "grade_coefficients"})

        strategy = ct.strategy()

        assert isinstance(strategy, ExtendedAveraging)
        assert strategy.use_math
        assert strategy.weighting is SubjectWeighting.GradeCoefficients

    def test_strict_ignores_use_math(self, fixed_clock: t.Callable[[], datetime.datetime]) -> None:
        """`use_math` is an extended option only."""
        ct = AveragingContainer(utcnow=fixed_clock)
        ct.config.from_dict({"method": "strict", "use_math": True})

        strategy = ct.strategy()

        assert isinstance(strategy, StrictAveraging)
        assert strategy.weighting is SubjectWeighting.SubjectCoefficient

    def test_engine_is_a_singleton(self, fixed_clock: t.Callable[[], datetime.datetime]) -> None:
        """The engine is built once and bound to the injected clock."""
        ct = AveragingContainer(utcnow=fixed_clock)
        ct.config.from_dict({"target": "average"})

        engine = ct.engine()

        assert engine is ct.engine()
        assert engine.target is Target.Average
        assert engine.utcnow is fixed_clock


class TestMoyenneContainer(object):
    def test_boot(
        self,
        container: MoyenneContainer,
        config_root: Path,
        grade_factory: t.Callable[..., Grade],
        fixed_clock: t.Callable[[], datetime.datetime],
    ) -> None:
        """Booting loads settings, applies overrides and assembles the engine."""
        MoyenneContainer.boot(
            container,
            debug=False,
            env=DeploymentEnvironment.Test,
            config_root=p.FileUrl(config_root.as_uri()),
            override=("averaging.method=extended",),
        )
        container.utcnow.override(fixed_clock)

        engine: AveragingEngine = container.averaging().engine()

        assert container.env() is DeploymentEnvironment.Test
        assert isinstance(engine.strategy, ExtendedAveraging)
        history = engine.averages_history([grade_factory(25)])
        assert history[-1].value == 20.0
        assert history[-1].date == "2025-01-01T12:00:00.000Z"

    def test_boot_rejects_remote_config(self, container: MoyenneContainer) -> None:
        """Configuration is only read from the local filesystem."""
        with pytest.raises(ValueError, match="unsupported scheme"):
            MoyenneContainer.boot(
                container,
                debug=False,
                env=DeploymentEnvironment.Test,
                config_root=t.cast(p.FileUrl, p.AnyUrl("https://example.org/config")),
            )
