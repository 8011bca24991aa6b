from __future__ import annotations

from pathlib import Path

import pydantic as p
import pytest
from pydantic_settings import SettingsError

from moyenne.core.config import Settings
from moyenne.model import AveragingMethod, DeploymentEnvironment, SubjectWeighting, Target

LOGGING_YAML = """
version: 1
formatters:
  plain:
    (): colorlog.ColoredFormatter
    format: "%(message)s"
handlers:
  console:
    class: colorlog.StreamHandler
    formatter: plain
    level: INFO
root:
  handlers: [console]
"""


@pytest.fixture
def settings_root(tmp_path: Path) -> Path:
    (tmp_path / "logging.yaml").write_text(LOGGING_YAML)
    (tmp_path / "averaging.yaml").write_text("method: strict\nuse_math: false\n")
    staging = tmp_path / "env.d" / "staging"
    staging.mkdir(parents=True)
    (staging / "averaging.yaml").write_text("method: extended\n")
    return tmp_path


def load(root: Path, env: DeploymentEnvironment = DeploymentEnvironment.Local, *override: str) -> Settings:
    return Settings(root=p.FileUrl(root.as_uri()), env=env, override=override)


class TestSettings(object):
    def test_loads_sections_from_root(self, settings_root: Path) -> None:
        """Each section is read from its own YAML file."""
        settings = load(settings_root)

        assert settings.averaging.method is AveragingMethod.Strict
        assert settings.averaging.target is Target.Student
        assert "console" in settings.logging.handlers

    def test_environment_cascades_over_root(self, settings_root: Path) -> None:
        """env.d/<env> documents are merged key by key over the root ones."""
        settings = load(settings_root, DeploymentEnvironment.Staging)

        assert settings.averaging.method is AveragingMethod.Extended
        assert settings.averaging.use_math is False

    def test_missing_environment_directory(self, settings_root: Path) -> None:
        """An environment without its own directory uses the root documents."""
        settings = load(settings_root, DeploymentEnvironment.Production)

        assert settings.averaging.method is AveragingMethod.Strict

    def test_overrides_win(self, settings_root: Path) -> None:
        """Command line overrides are parsed as YAML and merged last."""
        settings = load(
            settings_root,
            DeploymentEnvironment.Staging,
            "averaging.use_math=true",
            "averaging.weighting = grade_coefficients",
        )

        assert settings.averaging.method is AveragingMethod.Extended
        assert settings.averaging.use_math is True
        assert settings.averaging.weighting is SubjectWeighting.GradeCoefficients

    def test_malformed_override(self, settings_root: Path) -> None:
        """An override must be a key=value pair."""
        with pytest.raises(SettingsError):
            load(settings_root, DeploymentEnvironment.Local, "averaging.use_math")

    def test_invalid_value(self, settings_root: Path) -> None:
        """Values are validated like any other setting."""
        with pytest.raises(p.ValidationError):
            load(settings_root, DeploymentEnvironment.Local, "averaging.method=geometric")

    def test_logging_is_required(self, tmp_path: Path) -> None:
        """A configuration root without logging.yaml is rejected."""
        with pytest.raises(p.ValidationError):
            load(tmp_path)

    def test_repository_configuration(self, config_root: Path) -> None:
        """The shipped configuration is valid in every environment that has overrides."""
        for env in (DeploymentEnvironment.Local, DeploymentEnvironment.Development, DeploymentEnvironment.Test):
            settings = load(config_root, env)
            assert settings.averaging.method is AveragingMethod.Strict

        assert load(config_root, DeploymentEnvironment.Test).logging.handlers["console"].formatter == "plain"

    def test_only_stream_handlers(self, settings_root: Path) -> None:
        """Log output goes to the console; file handlers are not configurable."""
        override = "logging.handlers.console={class: logging.FileHandler, formatter: plain, level: INFO}"

        with pytest.raises(p.ValidationError):
            load(settings_root, DeploymentEnvironment.Local, override)
