from __future__ import annotations

import datetime
import os
import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import moyenne
from moyenne.lib.sentinel import NotReady
from moyenne.model import BaseModel, DeploymentEnvironment

from ..config import Settings
from ..provider import LoggingProvider, TimestampProvider
from .averaging import AveragingContainer


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    override: tuple[str, ...]


class MoyenneContainer(DeclarativeContainer):
    config: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Object(DeploymentEnvironment.Local)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    utcnow: Provider[TimestampProvider] = Object(lambda: datetime.datetime.now(datetime.UTC))

    averaging: Provider[AveragingContainer] = Container(AveragingContainer, config=config.averaging, utcnow=utcnow)

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: MoyenneContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)

        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(moyenne.__file__)).parent)

        imported = [mod for name, mod in list(sys.modules.items()) if name.startswith("moyenne.")]
        ct.wire(modules=[*imported, *(wiring or ())])

        logger = ct.logging().get_logger()
        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info(
                "overriding configuration parameter",
                extra={
                    "key": k,
                    "value": v,
                },
            )

        logger.debug(
            "configuration finished",
            extra={
                "config": str(config_root),
                "env": env.value,
                "averaging": repr(ct.averaging().strategy()),
            },
        )
        ct._boot_config.override(
            BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())
        )
