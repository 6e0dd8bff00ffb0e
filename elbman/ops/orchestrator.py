"""
End-to-end flow: validate options, run the RightScript, wait for the task.
"""

from __future__ import annotations

import contextlib
import logging
import time
from typing import Callable, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from elbman.api.api import Api
from elbman.errors import ConfigurationError, ElbManagerError
from elbman.io.credentials import (
    DEFAULT_API_URL,
    DEFAULT_API_VERSION,
    DEFAULT_ENV,
    DEFAULT_OAUTH2_API_URL,
    ElbManagerSettings,
)
from elbman.ops.dispatcher import Dispatcher
from elbman.ops.poller import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, TaskPoller
from elbman.ops.scripts import Action, Environment, ScriptTable

EXIT_OK = 0
EXIT_ERROR = 1


class RunConfig(BaseModel):
    """Options of one elbman invocation."""

    add: bool = False
    remove: bool = False
    env: str = DEFAULT_ENV
    server_array: Optional[str] = None
    elb: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION
    oauth2_api_url: str = DEFAULT_OAUTH2_API_URL
    refresh_token: Optional[SecretStr] = None
    dry_run: bool = False
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, ge=0)
    retry_count: int = 10
    retry_sleep_sec: float = 1

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: ElbManagerSettings, **options) -> "RunConfig":
        """Settings supply the defaults, ``options`` override them. None means unset."""
        values = {
            "env": settings.env,
            "api_url": settings.api_url,
            "api_version": settings.api_version,
            "oauth2_api_url": settings.oauth2_api_url,
            "refresh_token": settings.refresh_token,
            "timeout": settings.timeout,
            "poll_interval": settings.poll_interval,
            "retry_count": settings.retry_count,
            "retry_sleep_sec": settings.retry_sleep_sec,
        }
        values.update({k: v for k, v in options.items() if v is not None})
        return cls(**values)

    def validate_options(self) -> None:
        """
        Check the option combination.

        :raises ConfigurationError: with a message for the operator.
        """
        if self.add and self.remove:
            raise ConfigurationError("Add and remove are mutually exclusive.")
        if not self.add and not self.remove:
            raise ConfigurationError("You must specify an action, --add or --remove.")
        if not self.server_array or not self.elb:
            raise ConfigurationError("You must specify a server array and ELB to operate on.")
        if self.refresh_token is None or not self.refresh_token.get_secret_value():
            raise ConfigurationError("You must specify a refresh token.")
        Environment.parse(self.env)

    @property
    def action(self) -> Action:
        return Action.ADD if self.add else Action.REMOVE


def _execute(
    config: RunConfig,
    api: Api,
    scripts: ScriptTable,
    logger: logging.Logger,
    sleep: Callable[[float], None],
) -> None:
    if Environment.parse(config.env) is Environment.PROD:
        logger.warning("Operating on prod.")

    dispatcher = Dispatcher(api, scripts=scripts, logger=logger)
    task = dispatcher.dispatch(
        config.action,
        config.env,
        config.server_array,
        config.elb,
        dry_run=config.dry_run,
    )
    if task is None:
        logger.info("Dry run complete.")
        return

    poller = TaskPoller(
        api,
        timeout=config.timeout,
        poll_interval=config.poll_interval,
        logger=logger,
        sleep=sleep,
    )
    logger.info("Waiting for task to complete (%s).", task.href)
    poller.await_task(task)
    logger.info("%s complete.", config.action.verb % (config.server_array, config.elb))


def run(
    config: RunConfig,
    api: Optional[Api] = None,
    scripts: Optional[ScriptTable] = None,
    logger: Optional[logging.Logger] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run one attach/detach operation and return the process exit code.

    This is the only place where errors become exit codes. A client built
    here is closed before returning; an injected one is left open.
    """
    logger = logger or logging.getLogger(__name__)
    try:
        config.validate_options()
        if scripts is None:
            scripts = ScriptTable.default()
        if api is None:
            api = Api(
                api_url=config.api_url,
                refresh_token=config.refresh_token.get_secret_value(),
                oauth2_api_url=config.oauth2_api_url,
                api_version=config.api_version,
                retry_count=config.retry_count,
                retry_sleep_sec=config.retry_sleep_sec,
                logger=logger,
            )
            owned = api
        else:
            owned = contextlib.nullcontext()

        with owned:
            _execute(config, api, scripts, logger, sleep)
    except ElbManagerError as exc:
        logger.error(str(exc))
        return exc.exit_code
    except requests.RequestException as exc:
        logger.error("FAILED.  RightScale API request failed: %s", exc)
        return EXIT_ERROR
    return EXIT_OK


def run_from_settings(settings: Optional[ElbManagerSettings] = None, **options) -> int:
    """Build a :class:`RunConfig` from settings plus overrides, then :func:`run` it."""
    logger = options.pop("logger", None) or logging.getLogger(__name__)
    try:
        try:
            settings = settings or ElbManagerSettings()
            config = RunConfig.from_settings(settings, **options)
        except ValidationError as exc:
            raise ConfigurationError.from_validation_error(exc) from exc
        scripts = ScriptTable.from_mapping(settings.right_scripts)
    except ConfigurationError as exc:
        logger.error(str(exc))
        return exc.exit_code
    return run(config, scripts=scripts, logger=logger)
